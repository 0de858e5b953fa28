"""Executor implementations."""

from .base import (
    Executor,
    RemoteError,
    TransportError,
    TransportTimeout,
    TransportConnectionError,
    TransportPortError,
)

from . import memory
from .memory import MemoryExecutor
