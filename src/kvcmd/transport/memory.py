"""A process-local, single-node store that answers fetch operations.

The vector clock kept for each key follows the usual shape, one counter per
writing node, incremented on every write. Quorum, n_val and timeout fields
are accepted and ignored; with one node there is nothing for them to act on.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
import time
from typing import Dict, Optional, Tuple

from .. import json
from ..cap import BasicVClock, VClock
from ..location import Location
from ..protocol.fetch import FetchOperation, FetchResponse
from ..stored import StoredObject
from .base import Executor


logger = logging.getLogger(__name__)


@dataclasses.dataclass
class _Entry:
    objects: Tuple[StoredObject, ...]
    vclock: VClock
    tombstone: bool = False


def _increment(vclock: Optional[VClock], node_id: str) -> VClock:
    """Return a new clock with *node_id*'s counter advanced by one."""

    if vclock is None:
        clocks: Dict[str, int] = {}
    else:
        clocks = dict(json.loads(vclock.bytes))

    clocks[node_id] = clocks.get(node_id, 0) + 1
    ordered = dict(sorted(clocks.items()))
    return BasicVClock(json.dumps(ordered))


class MemoryExecutor(Executor):
    """Thread-safe in-memory store. Write with :func:`put` and
    :func:`delete`; read by executing fetch operations against it.
    """

    def __init__(self, node_id: str = "memory"):
        self.node_id = node_id
        self._entries: Dict[Tuple[bytes, bytes, bytes], _Entry] = {}
        self._lock = threading.Lock()

    def put(self, location: Location, *objects: StoredObject) -> VClock:
        """Replace the value at *location*; more than one object stores
        siblings. Returns the new vector clock.
        """

        if not objects:
            raise ValueError("put() requires at least one object")

        now = time.time()
        stamped = []
        for stored in objects:
            if stored.last_modified is None:
                stored = dataclasses.replace(stored, last_modified=now)
            stamped.append(stored)

        with self._lock:
            previous = self._entries.get(location.parts())
            vclock = _increment(previous.vclock if previous else None, self.node_id)
            self._entries[location.parts()] = _Entry(tuple(stamped), vclock)

        logger.debug("put %r: %d object(s), vclock %s", location, len(stamped), vclock.as_string())
        return vclock

    def delete(self, location: Location) -> Optional[VClock]:
        """Leave a tombstone at *location*. Returns the tombstone's vector
        clock, or None if nothing was stored there.
        """

        with self._lock:
            previous = self._entries.get(location.parts())
            if previous is None:
                return None

            vclock = _increment(previous.vclock, self.node_id)
            self._entries[location.parts()] = _Entry((), vclock, tombstone=True)

        logger.debug("delete %r: vclock %s", location, vclock.as_string())
        return vclock

    def execute(self, operation: FetchOperation) -> FetchResponse:

        with self._lock:
            entry = self._entries.get((operation.bucket_type, operation.bucket, operation.key))

        if entry is None:
            return FetchResponse(not_found=True)

        if entry.tombstone:
            vclock = entry.vclock if operation.return_deleted_vclock else None
            return FetchResponse(not_found=True, vclock=vclock)

        if operation.if_not_modified is not None and operation.if_not_modified == entry.vclock.bytes:
            return FetchResponse(unchanged=True, vclock=entry.vclock)

        objects = entry.objects
        if operation.head_only:
            objects = tuple(stored.without_value() for stored in objects)

        return FetchResponse(objects=objects, vclock=entry.vclock)
