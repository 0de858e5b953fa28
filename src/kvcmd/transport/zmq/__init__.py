"""ZeroMQ transport: a DEALER client executor and a ROUTER server."""

from . import request
from .request import Client, Server, client
