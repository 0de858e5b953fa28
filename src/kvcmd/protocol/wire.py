"""Multipart encoding of fetch requests and replies.

Layout:

    request:  version, id, FETCH, payload_json, bucket_type, bucket, key, if_not_modified
    reply:    version, id, REP,   payload_json, vclock, value_0 ... value_n

Everything that is raw bytes travels in its own frame; the JSON payload
carries only scalars and per-object metadata. An empty ``if_not_modified``
or ``vclock`` frame means the field is absent.
"""

from __future__ import annotations

import itertools
import threading
from typing import List, Optional, Sequence, Tuple

from .. import json
from ..cap import BasicVClock
from ..stored import StoredObject
from .fetch import FetchOperation, FetchResponse
from . import fields


class WireError(ValueError):
    """A frame sequence could not be decoded."""


_id_lock = threading.Lock()
_id_ticker = itertools.count()


def next_id() -> bytes:
    """Return a locally unique request identifier."""

    with _id_lock:
        value = next(_id_ticker) & 0xFFFFFFFF

    return b"%08x" % (value)


# Scalar request fields and the JSON types they may carry. The vector clock
# travels in its own frame and is not a scalar.

_scalar_types = {
    "r": int,
    "pr": int,
    "n_val": int,
    "timeout": int,
    "return_deleted_vclock": bool,
    "head_only": bool,
    "basic_quorum": bool,
    "sloppy_quorum": bool,
    "notfound_ok": bool,
}


def _check_scalar(name: str, value) -> None:

    expected = _scalar_types[name]

    # bool is a subclass of int; neither stands in for the other here.

    if expected is int:
        valid = isinstance(value, int) and not isinstance(value, bool)
    else:
        valid = isinstance(value, bool)

    if not valid:
        raise WireError(f"request field {name} must be {expected.__name__}, got {type(value).__name__}")


def _check_header(parts: Sequence[bytes], kind: bytes, minimum: int) -> None:

    if len(parts) < minimum:
        raise WireError(f"expected at least {minimum} frames, got {len(parts)}")

    if parts[0] != fields.VERSION:
        raise WireError(
            f"message is protocol {parts[0]!r}, recipient expects {fields.VERSION!r}"
        )

    if parts[2] != kind:
        raise WireError(f"expected a {kind!r} message, got {parts[2]!r}")


def encode_request(operation: FetchOperation, msg_id: bytes) -> Tuple[bytes, ...]:

    scalars = operation.options()
    scalars.pop("if_not_modified", None)

    payload = json.dumps(scalars)
    clock = operation.if_not_modified or b""

    return (
        fields.VERSION,
        msg_id,
        fields.FETCH,
        payload,
        operation.bucket_type,
        operation.bucket,
        operation.key,
        clock,
    )


def decode_request(parts: Sequence[bytes]) -> Tuple[bytes, FetchOperation]:
    """Return the (id, operation) pair carried by *parts*."""

    _check_header(parts, fields.FETCH, 8)

    msg_id = parts[1]

    try:
        scalars = json.loads(parts[3]) if parts[3] else {}
    except (json.DecodeError, ValueError) as error:
        raise WireError(f"invalid request payload: {error}") from error

    if not isinstance(scalars, dict):
        raise WireError(f"request payload must be an object, not {type(scalars).__name__}")

    unknown = set(scalars) - set(_scalar_types)
    if unknown:
        raise WireError(f"unrecognized request fields: {sorted(unknown)}")

    try:
        builder = FetchOperation.Builder(parts[5], parts[6])
        builder.with_bucket_type(parts[4])
    except ValueError as error:
        raise WireError(f"invalid request location: {error}") from error

    for name, value in scalars.items():
        _check_scalar(name, value)
        setter = getattr(builder, "with_" + name)
        setter(value)

    if parts[7]:
        builder.with_if_not_modified(parts[7])

    return msg_id, builder.build()


def encode_response(response: FetchResponse, msg_id: bytes) -> Tuple[bytes, ...]:

    payload = {
        fields.NOT_FOUND: response.not_found,
        fields.UNCHANGED: response.unchanged,
        fields.HAS_VCLOCK: response.vclock is not None,
        fields.OBJECTS: [stored.metadata() for stored in response.objects],
    }

    clock = response.vclock.bytes if response.vclock is not None else b""
    values = tuple(stored.value for stored in response.objects)

    return (fields.VERSION, msg_id, fields.REP, json.dumps(payload), clock) + values


def encode_error(msg_id: bytes, error_type: str, text: str) -> Tuple[bytes, ...]:

    payload = {fields.ERROR: {"type": error_type, "text": text}}
    return (fields.VERSION, msg_id, fields.REP, json.dumps(payload), b"")


def decode_response(parts: Sequence[bytes]) -> Tuple[bytes, Optional[dict], Optional[FetchResponse]]:
    """Return (id, error, response); exactly one of error and response is None."""

    _check_header(parts, fields.REP, 5)

    msg_id = parts[1]

    try:
        payload = json.loads(parts[3])
    except (json.DecodeError, ValueError) as error:
        raise WireError(f"invalid reply payload: {error}") from error

    if not isinstance(payload, dict):
        raise WireError(f"reply payload must be an object, not {type(payload).__name__}")

    error = payload.get(fields.ERROR)
    if error is not None:
        if not isinstance(error, dict):
            raise WireError("reply error must be an object")
        return msg_id, error, None

    metadata: List[dict] = payload.get(fields.OBJECTS, [])

    if not isinstance(metadata, list) or not all(isinstance(meta, dict) for meta in metadata):
        raise WireError("reply objects must be a list of objects")

    values = parts[5:]

    if len(values) != len(metadata):
        raise WireError(
            f"reply describes {len(metadata)} objects but carries {len(values)} values"
        )

    try:
        objects = tuple(
            StoredObject.from_metadata(meta, value) for meta, value in zip(metadata, values)
        )
    except (TypeError, ValueError) as error:
        raise WireError(f"invalid object metadata: {error}") from error

    vclock = None
    if payload.get(fields.HAS_VCLOCK):
        vclock = BasicVClock(parts[4])

    response = FetchResponse(
        objects=objects,
        not_found=bool(payload.get(fields.NOT_FOUND, False)),
        unchanged=bool(payload.get(fields.UNCHANGED, False)),
        vclock=vclock,
    )

    return msg_id, None, response
