""" Python client commands for a distributed key/value store. A command
    captures one request, here a fetch by key, together with its per-request
    options; executing it against an executor produces a typed response.

        import kvcmd

        location = kvcmd.Location('users', '42')
        response = kvcmd.fetch(location).with_r(2).execute(kvcmd.connect())
"""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Utility components.

from . import json
from . import config

# Value types.

from . import cap
from . import location
from . import stored
from . import convert
from . import options

from .cap import Quorum, VClock, BasicVClock
from .location import Location
from .stored import StoredObject

# Submodules used by multiple other components.

from . import protocol
from . import adapter
from . import transport

# Primary public-facing interfaces.

from . import command
fetch = command.fetch
FetchValue = command.FetchValue
Response = command.Response

from . import begin
connect = begin.connect

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
