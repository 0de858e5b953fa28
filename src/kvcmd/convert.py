""" Converters turn the store's native :class:`kvcmd.stored.StoredObject`
    values into whatever domain type the caller wants back from a fetch.
    A converter is any object with a ``convert(stored)`` method; the classes
    here cover the common cases.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, Iterable, List, Optional, TypeVar

from . import json
from .stored import StoredObject


T = TypeVar('T')


class ConversionError(Exception):
    """ A converter could not produce a domain value from a stored object.
    """


class Converter(ABC, Generic[T]):

    @abstractmethod
    def convert(self, stored: StoredObject) -> T:
        """ Return the domain representation of *stored*.
        """


class PassThroughConverter(Converter[StoredObject]):
    """ Return stored objects as-is.
    """

    def convert(self, stored: StoredObject) -> StoredObject:
        return stored


class FunctionConverter(Converter[T]):
    """ Adapt a plain callable taking a stored object to the
        :class:`Converter` interface.
    """

    def __init__(self, function: Callable[[StoredObject], T]):

        if not callable(function):
            raise TypeError('FunctionConverter requires a callable')

        self.function = function

    def convert(self, stored: StoredObject) -> T:
        return self.function(stored)


class StringConverter(Converter[str]):

    def __init__(self, charset: Optional[str] = None):
        self.charset = charset

    def convert(self, stored: StoredObject) -> str:

        charset = self.charset or stored.charset or 'utf-8'

        try:
            return stored.value.decode(charset)
        except (UnicodeDecodeError, LookupError) as error:
            raise ConversionError('cannot decode value as %s: %s' % (charset, error)) from error


class JSONConverter(Converter[T]):
    """ Decode the stored body as JSON. If a *factory* is given the decoded
        value is passed to it, and its return value is the result; a factory
        would typically be a domain class accepting the decoded dictionary.

        An empty body, which is what a head-only fetch returns, converts to
        None without invoking the factory.
    """

    def __init__(self, factory: Optional[Callable[[Any], T]] = None):
        self.factory = factory

    def convert(self, stored: StoredObject) -> Optional[T]:

        if not stored.has_value():
            return None

        try:
            decoded = json.loads(stored.value)
        except (json.DecodeError, ValueError) as error:
            raise ConversionError('value is not valid JSON: %s' % (error)) from error

        if self.factory is None:
            return decoded

        try:
            return self.factory(decoded)
        except (TypeError, ValueError, KeyError) as error:
            name = getattr(self.factory, '__name__', repr(self.factory))
            raise ConversionError('cannot build %s from value: %s' % (name, error)) from error


def as_converter(thing) -> Converter:
    """ Return *thing* if it already behaves like a converter, wrap it in
        a :class:`FunctionConverter` if it is a bare callable, and return a
        :class:`PassThroughConverter` if it is None.
    """

    if thing is None:
        return PassThroughConverter()

    try:
        thing.convert
    except AttributeError:
        pass
    else:
        return thing

    if callable(thing):
        return FunctionConverter(thing)

    raise TypeError('not a converter: ' + repr(thing))


def convert(converter: Converter[T], values: Iterable[StoredObject]) -> List[T]:
    """ Apply *converter* to each element of *values*, preserving order. Any
        exception raised by the converter propagates to the caller.
    """

    return [converter.convert(value) for value in values]


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
