""" Per-request options for a fetch. The set of recognized options is closed:
    each :class:`FetchOption.Type` member has exactly one descriptor here,
    and each descriptor declares the one value type it accepts. Every kind
    must also have a translation rule in :mod:`kvcmd.adapter`.
"""

from __future__ import annotations

import enum
from typing import Any, Dict, Generic, Iterator, Optional, Tuple, TypeVar, Union

from .cap import Quorum, VClock


U = TypeVar('U')


class ConfigurationError(ValueError):
    """ An option was given a value that does not satisfy its contract, or
        an option kind that is not recognized.
    """


class FetchOption(Generic[U]):
    """ A stateless descriptor pairing an option kind with the type of
        value it accepts. The module-level instances (:data:`R`,
        :data:`TIMEOUT`, and so on) are the only ones that should exist.
    """

    class Type(enum.Enum):
        R = 'r'
        PR = 'pr'
        N_VAL = 'n_val'
        TIMEOUT = 'timeout'
        DELETED_VCLOCK = 'deleted_vclock'
        HEAD = 'head'
        BASIC_QUORUM = 'basic_quorum'
        IF_MODIFIED = 'if_modified'
        SLOPPY_QUORUM = 'sloppy_quorum'
        NOTFOUND_OK = 'notfound_ok'

    _registry: Dict['FetchOption.Type', 'FetchOption'] = dict()

    def __init__(self, type: 'FetchOption.Type', value_type: type, minimum: Optional[int] = None):

        if type in self._registry:
            raise ValueError('option already registered: ' + type.name)

        self.type = type
        self.value_type = value_type
        self.minimum = minimum
        self._registry[type] = self


    def __repr__(self):
        return 'FetchOption.' + self.type.name


    @classmethod
    def lookup(cls, type: 'FetchOption.Type') -> FetchOption:
        """ Return the descriptor for the option kind *type*.
        """

        try:
            return cls._registry[type]
        except (KeyError, TypeError):
            raise ConfigurationError('unrecognized fetch option: ' + repr(type))


    @classmethod
    def values(cls) -> Tuple[FetchOption, ...]:
        return tuple(cls._registry[type] for type in cls.Type)


    def check(self, value: Any) -> U:
        """ Return *value* if it satisfies this option's contract, otherwise
            raise :class:`ConfigurationError`.
        """

        expected = self.value_type

        # bool is a subclass of int; neither stands in for the other here.

        if expected is int:
            valid = isinstance(value, int) and not isinstance(value, bool)
        elif expected is bool:
            valid = isinstance(value, bool)
        else:
            valid = isinstance(value, expected)

        if not valid:
            error = '%s expects %s, got %s' % (self.type.name, expected.__name__, type(value).__name__)
            raise ConfigurationError(error)

        if self.minimum is not None and value < self.minimum:
            error = '%s must be at least %d, got %d' % (self.type.name, self.minimum, value)
            raise ConfigurationError(error)

        return value


# end of class FetchOption


R: FetchOption[Quorum] = FetchOption(FetchOption.Type.R, Quorum)
PR: FetchOption[Quorum] = FetchOption(FetchOption.Type.PR, Quorum)
N_VAL: FetchOption[int] = FetchOption(FetchOption.Type.N_VAL, int, minimum=1)
TIMEOUT: FetchOption[int] = FetchOption(FetchOption.Type.TIMEOUT, int, minimum=1)
DELETED_VCLOCK: FetchOption[bool] = FetchOption(FetchOption.Type.DELETED_VCLOCK, bool)
HEAD: FetchOption[bool] = FetchOption(FetchOption.Type.HEAD, bool)
BASIC_QUORUM: FetchOption[bool] = FetchOption(FetchOption.Type.BASIC_QUORUM, bool)
IF_MODIFIED: FetchOption[VClock] = FetchOption(FetchOption.Type.IF_MODIFIED, VClock)
SLOPPY_QUORUM: FetchOption[bool] = FetchOption(FetchOption.Type.SLOPPY_QUORUM, bool)
NOTFOUND_OK: FetchOption[bool] = FetchOption(FetchOption.Type.NOTFOUND_OK, bool)



class OptionSet:
    """ The options attached to one command, at most one value per kind.
        Values are checked against their kind's contract as they are put;
        a later put for the same kind replaces the earlier value.
    """

    def __init__(self):
        self._values: Dict[FetchOption.Type, Any] = dict()


    def __contains__(self, option):
        return _resolve(option).type in self._values


    def __iter__(self) -> Iterator[FetchOption.Type]:
        return iter(self._values)


    def __len__(self):
        return len(self._values)


    def __repr__(self):
        pairs = ('%s=%r' % (type.name, value) for type, value in self._values.items())
        return 'OptionSet(' + ', '.join(pairs) + ')'


    def put(self, option: Union[FetchOption[U], FetchOption.Type], value: U) -> None:
        descriptor = _resolve(option)
        self._values[descriptor.type] = descriptor.check(value)


    def get(self, option, default=None):
        return self._values.get(_resolve(option).type, default)


    def entries(self) -> Tuple[Tuple[FetchOption.Type, Any], ...]:
        return tuple(self._values.items())


    def copy(self) -> OptionSet:
        duplicate = OptionSet()
        duplicate._values.update(self._values)
        return duplicate


# end of class OptionSet



def _resolve(option) -> FetchOption:
    """ Accept either a descriptor or a bare :class:`FetchOption.Type` and
        return the registered descriptor.
    """

    if isinstance(option, FetchOption):
        registered = FetchOption.lookup(option.type)
        if registered is not option:
            raise ConfigurationError('unregistered fetch option: ' + repr(option))
        return registered

    return FetchOption.lookup(option)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
