""" Value types for the consistency and causality controls a fetch can carry:
    the :class:`Quorum` used for R and PR, and the :class:`VClock` used for
    conditional fetches.
"""

from __future__ import annotations

import base64
from abc import ABC, abstractmethod


class Quorum:
    """ A replica count, or one of the symbolic quorum policies. Symbolic
        values are represented by reserved negative integers so that every
        quorum reduces to a single integer on its way into an operation.
    """

    ONE = -2
    QUORUM = -3
    ALL = -4
    DEFAULT = -5

    _names = {ONE: 'one', QUORUM: 'quorum', ALL: 'all', DEFAULT: 'default'}

    __slots__ = ('_value',)

    def __init__(self, value: int):

        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError('a quorum is an integer, not ' + type(value).__name__)

        if value < 0 and value not in self._names:
            raise ValueError('invalid quorum value: %d' % (value))

        self._value = value


    @classmethod
    def one(cls) -> Quorum:
        return cls(cls.ONE)


    @classmethod
    def quorum(cls) -> Quorum:
        return cls(cls.QUORUM)


    @classmethod
    def all(cls) -> Quorum:
        return cls(cls.ALL)


    @classmethod
    def default(cls) -> Quorum:
        return cls(cls.DEFAULT)


    @property
    def int_value(self) -> int:
        return self._value


    def is_symbolic(self) -> bool:
        return self._value in self._names


    def __eq__(self, other):
        if not isinstance(other, Quorum):
            return NotImplemented
        return self._value == other._value


    def __hash__(self):
        return hash(('Quorum', self._value))


    def __repr__(self):
        try:
            name = self._names[self._value]
        except KeyError:
            return 'Quorum(%d)' % (self._value)
        else:
            return 'Quorum.' + name + '()'


# end of class Quorum



class VClock(ABC):
    """ An opaque vector clock as handed back by the store. The only thing
        a client does with one is hand it back: :attr:`bytes` is the
        serialized form sent with a conditional fetch.
    """

    @property
    @abstractmethod
    def bytes(self) -> bytes:
        raise NotImplementedError


    def as_string(self) -> str:
        """ Return the base64 text form of the clock.
        """

        return base64.b64encode(self.bytes).decode('ascii')


    def __eq__(self, other):
        if not isinstance(other, VClock):
            return NotImplemented
        return self.bytes == other.bytes


    def __hash__(self):
        return hash(('VClock', self.bytes))


    def __repr__(self):
        return '%s(%s)' % (type(self).__name__, self.as_string())


# end of class VClock



class BasicVClock(VClock):
    """ A :class:`VClock` backed by a private copy of the raw *clock* bytes.
    """

    __slots__ = ('_clock',)

    def __init__(self, clock: bytes):

        if isinstance(clock, str):
            clock = clock.encode('utf-8')

        self._clock = bytes(clock)


    @classmethod
    def from_string(cls, text: str) -> BasicVClock:
        """ Inverse of :func:`VClock.as_string`.
        """

        return cls(base64.b64decode(text))


    @property
    def bytes(self) -> bytes:
        return self._clock


# end of class BasicVClock


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
