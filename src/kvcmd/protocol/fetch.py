""" The wire-level fetch operation, the builder used to assemble one, and
    the raw response an executor returns for it. Nothing here knows about
    options or converters; see :mod:`kvcmd.adapter` and :mod:`kvcmd.command`
    for that.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ..cap import VClock
from ..location import DEFAULT_BUCKET_TYPE
from ..stored import StoredObject


@dataclass(frozen=True)
class FetchOperation:
    """ An immutable fetch request. Every optional field is None unless the
        corresponding builder setter was called.
    """

    bucket: bytes
    key: bytes
    bucket_type: bytes = DEFAULT_BUCKET_TYPE
    r: Optional[int] = None
    pr: Optional[int] = None
    n_val: Optional[int] = None
    timeout: Optional[int] = None
    return_deleted_vclock: Optional[bool] = None
    head_only: Optional[bool] = None
    basic_quorum: Optional[bool] = None
    if_not_modified: Optional[bytes] = None
    sloppy_quorum: Optional[bool] = None
    notfound_ok: Optional[bool] = None

    optional_fields = (
        'r', 'pr', 'n_val', 'timeout', 'return_deleted_vclock', 'head_only',
        'basic_quorum', 'if_not_modified', 'sloppy_quorum', 'notfound_ok',
    )

    def options(self) -> dict:
        """ Return the optional fields that were set, by field name.
        """

        options = dict()
        for name in self.optional_fields:
            value = getattr(self, name)
            if value is not None:
                options[name] = value

        return options


    class Builder:
        """ Mutable builder for a :class:`FetchOperation`. The *bucket* and
            *key* are required up front; every setter returns the builder so
            that calls can be chained, and :func:`build` produces the final
            immutable operation.
        """

        def __init__(self, bucket: bytes, key: bytes):

            if not bucket:
                raise ValueError('a fetch requires a bucket')
            if not key:
                raise ValueError('a fetch requires a key')

            self._fields = dict(bucket=bytes(bucket), key=bytes(key))

        def with_bucket_type(self, bucket_type: bytes):
            if not bucket_type:
                raise ValueError('the bucket type cannot be empty')
            self._fields['bucket_type'] = bytes(bucket_type)
            return self

        def with_r(self, r: int):
            self._fields['r'] = r
            return self

        def with_pr(self, pr: int):
            self._fields['pr'] = pr
            return self

        def with_n_val(self, n_val: int):
            self._fields['n_val'] = n_val
            return self

        def with_timeout(self, timeout: int):
            self._fields['timeout'] = timeout
            return self

        def with_return_deleted_vclock(self, flag: bool):
            self._fields['return_deleted_vclock'] = flag
            return self

        def with_head_only(self, flag: bool):
            self._fields['head_only'] = flag
            return self

        def with_basic_quorum(self, flag: bool):
            self._fields['basic_quorum'] = flag
            return self

        def with_if_not_modified(self, vclock: bytes):
            self._fields['if_not_modified'] = bytes(vclock)
            return self

        def with_sloppy_quorum(self, flag: bool):
            self._fields['sloppy_quorum'] = flag
            return self

        def with_notfound_ok(self, flag: bool):
            self._fields['notfound_ok'] = flag
            return self

        def build(self) -> FetchOperation:
            return FetchOperation(**self._fields)


# end of class FetchOperation



@dataclass(frozen=True)
class FetchResponse:
    """ What an executor hands back for a :class:`FetchOperation`: zero or
        more sibling objects, the not-found and unchanged flags, and the
        vector clock, if any.
    """

    objects: Tuple[StoredObject, ...] = ()
    not_found: bool = False
    unchanged: bool = False
    vclock: Optional[VClock] = None

    def __post_init__(self):
        object.__setattr__(self, 'objects', tuple(self.objects))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
