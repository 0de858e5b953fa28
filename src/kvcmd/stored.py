""" The store's native representation of a value: the body bytes plus the
    metadata kept alongside it. A fetch returns one :class:`StoredObject` per
    sibling; a :class:`kvcmd.convert.PassThroughConverter` hands these back
    to the caller unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass
class StoredObject:

    value: bytes = b''
    content_type: str = 'application/octet-stream'
    charset: Optional[str] = None
    vtag: Optional[str] = None
    last_modified: Optional[float] = None
    deleted: bool = False
    user_meta: Dict[str, str] = field(default_factory=dict)

    def has_value(self) -> bool:
        return len(self.value) > 0

    def value_as_string(self) -> str:
        """ Decode the body using the declared charset, or UTF-8 if none
            was declared.
        """

        charset = self.charset or 'utf-8'
        return self.value.decode(charset)

    def metadata(self) -> dict:
        """ Everything but the body, as a dictionary of JSON-friendly values.
        """

        return {
            'content_type': self.content_type,
            'charset': self.charset,
            'vtag': self.vtag,
            'last_modified': self.last_modified,
            'deleted': self.deleted,
            'user_meta': dict(self.user_meta),
        }

    @classmethod
    def from_metadata(cls, metadata: dict, value: bytes = b'') -> StoredObject:
        """ Inverse of :func:`metadata`, reattaching the body *value*.
        """

        return cls(
            value=value,
            content_type=metadata.get('content_type', 'application/octet-stream'),
            charset=metadata.get('charset'),
            vtag=metadata.get('vtag'),
            last_modified=metadata.get('last_modified'),
            deleted=bool(metadata.get('deleted', False)),
            user_meta=dict(metadata.get('user_meta') or {}),
        )

    def without_value(self) -> StoredObject:
        """ Return a copy with the body removed, as for a head-only fetch.
        """

        return StoredObject.from_metadata(self.metadata())


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
