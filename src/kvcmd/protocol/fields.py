"""Protocol constants.

Keep these in one place to avoid stringly-typed message handling.
"""

VERSION = b"k1"

FETCH = b"FETCH"
REP = b"REP"

# Reply payload keys
NOT_FOUND = "not_found"
UNCHANGED = "unchanged"
HAS_VCLOCK = "has_vclock"
OBJECTS = "objects"
ERROR = "error"
