"""
kvcmd Protocol Layer
====================

The transport-agnostic description of a fetch, as it travels between a
client and a store.

    FetchValue command (kvcmd.command)
        │  options translated by kvcmd.adapter
        ▼
    Operation model (fetch.py)
        FetchOperation, FetchOperation.Builder, FetchResponse
        │
        ▼
    Wire codec (wire.py)
        FetchOperation / FetchResponse <-> multipart frames
        │
        ▼
    Field vocabulary (fields.py)
        Canonical frame types and payload keys

The protocol layer MUST NOT depend on any transport implementation; the
ZeroMQ transport in :mod:`kvcmd.transport.zmq` depends on this package, never
the reverse.
"""

from . import fields
from . import fetch
from . import wire

from .fetch import FetchOperation, FetchResponse


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
