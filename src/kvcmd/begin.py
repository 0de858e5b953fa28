""" Implementation of the top-level :func:`connect` method, which hands out
    the executor that :func:`kvcmd.fetch` commands are normally run against.
"""

import threading

from . import config
from . import transport


_memory = None
_memory_lock = threading.Lock()


def connect(address=None, port=None):
    """ Return an executor chosen by :data:`kvcmd.config.transport`.

        For the 'zmq' transport this is the cached
        :class:`kvcmd.transport.zmq.Client` for the given *address* and
        *port*, defaulting to :data:`kvcmd.config.address` and
        :data:`kvcmd.config.port`; repeated calls with the same endpoint
        return the same instance. For the 'memory' transport it is a single
        process-wide :class:`kvcmd.transport.MemoryExecutor`, and the
        *address* and *port* are ignored.
    """

    global _memory

    name = config.transport

    if name == 'memory':
        with _memory_lock:
            if _memory is None:
                _memory = transport.MemoryExecutor()
            return _memory

    if name == 'zmq':
        from .transport import zmq

        if address is None:
            address = config.address
        if port is None:
            port = config.port

        return zmq.client(address, port)

    raise ValueError('unknown KVCMD_TRANSPORT: %r' % (name))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
