""" Client-side settings, read once from the environment. These are the
    defaults used by :func:`kvcmd.begin.connect` when the caller does not
    name an endpoint explicitly.
"""

import os


def _float(name, default):
    value = os.environ.get(name)
    if value is None or value == '':
        return default

    try:
        return float(value)
    except ValueError:
        raise ValueError("%s must be a number, not %r" % (name, value))


def _int(name, default):
    value = os.environ.get(name)
    if value is None or value == '':
        return default

    try:
        return int(value)
    except ValueError:
        raise ValueError("%s must be an integer, not %r" % (name, value))


# Which executor connect() hands out: 'zmq' for a remote store, 'memory' for
# a process-local store.

transport = os.environ.get('KVCMD_TRANSPORT', 'zmq').lower()

address = os.environ.get('KVCMD_ADDRESS', 'localhost')
port = _int('KVCMD_PORT', 10079)

# Seconds to wait for a reply when the operation itself carries no timeout.

timeout = _float('KVCMD_TIMEOUT', 60.0)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
