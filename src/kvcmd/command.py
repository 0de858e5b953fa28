""" The :class:`FetchValue` command: fetch the value stored at a
    :class:`kvcmd.location.Location`, shaped by any number of per-request
    options, and convert what comes back into domain objects.

    Typical use::

        response = kvcmd.fetch(location).with_r(2).with_timeout(5000).execute(executor)
        if response.has_value():
            for stored in response.get_value():
                ...
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar, Union

from . import adapter
from . import options
from .cap import Quorum, VClock
from .convert import Converter, as_converter, convert
from .location import Location
from .options import FetchOption, OptionSet
from .protocol.fetch import FetchOperation


T = TypeVar('T')
U = TypeVar('U')
Result = TypeVar('Result')

logger = logging.getLogger(__name__)


class Command(ABC, Generic[Result]):
    """ Base class for commands. A command holds everything needed to issue
        one request, and issues it when :func:`execute` is called with an
        executor.
    """

    @abstractmethod
    def execute(self, executor) -> Result:
        """ Issue the request via *executor* and return the result.
        """


# end of class Command



class FetchValue(Command, Generic[T]):
    """ Fetch a value by key. Instances are normally obtained from
        :func:`fetch`; options are attached with :func:`with_option` or one
        of the typed ``with_*`` shortcuts, each of which returns the same
        command so that calls can be chained.

        A command may be executed any number of times; each execution reads
        the options as they stand at that moment. It is not safe to modify
        a command from one thread while another is executing it.
    """

    def __init__(self, location: Location, converter: Converter[T]):

        self.location = location
        self.converter = converter
        self.options = OptionSet()


    def __repr__(self):
        return 'FetchValue(%r, %r)' % (self.location, self.options)


    def with_option(self, option: FetchOption[U], value: U) -> FetchValue[T]:
        """ Add an optional setting for this command. It will be passed along
            with the request to tell the store how to behave when servicing
            it. Setting the same option twice keeps only the second value.
            A value of the wrong type raises
            :class:`kvcmd.options.ConfigurationError` immediately.
        """

        self.options.put(option, value)
        return self


    def with_r(self, quorum: Union[Quorum, int]) -> FetchValue[T]:
        return self.with_option(options.R, _quorum(quorum))


    def with_pr(self, quorum: Union[Quorum, int]) -> FetchValue[T]:
        return self.with_option(options.PR, _quorum(quorum))


    def with_n_val(self, n_val: int) -> FetchValue[T]:
        return self.with_option(options.N_VAL, n_val)


    def with_timeout(self, milliseconds: int) -> FetchValue[T]:
        return self.with_option(options.TIMEOUT, milliseconds)


    def with_deleted_vclock(self, flag: bool = True) -> FetchValue[T]:
        return self.with_option(options.DELETED_VCLOCK, flag)


    def with_head(self, flag: bool = True) -> FetchValue[T]:
        return self.with_option(options.HEAD, flag)


    def with_basic_quorum(self, flag: bool = True) -> FetchValue[T]:
        return self.with_option(options.BASIC_QUORUM, flag)


    def with_if_modified(self, vclock: VClock) -> FetchValue[T]:
        return self.with_option(options.IF_MODIFIED, vclock)


    def with_sloppy_quorum(self, flag: bool = True) -> FetchValue[T]:
        return self.with_option(options.SLOPPY_QUORUM, flag)


    def with_notfound_ok(self, flag: bool = True) -> FetchValue[T]:
        return self.with_option(options.NOTFOUND_OK, flag)


    def operation(self, executor=None) -> FetchOperation:
        """ Build the operation this command would send. If the *executor*
            supplies its own builder, that builder is used.
        """

        bucket = self.location.bucket
        key = self.location.key

        try:
            new_builder = executor.builder
        except AttributeError:
            new_builder = FetchOperation.Builder

        builder = new_builder(bucket, key)
        return adapter.build(self.location, self.options, builder)


    def execute(self, executor) -> Response[T]:
        """ Send the fetch to *executor*, block until it answers, and return
            a :class:`Response`. Transport and conversion errors propagate
            to the caller unchanged; not-found and unchanged results do not
            raise.
        """

        operation = self.operation(executor)
        logger.debug("fetch %r options=%r", self.location, operation.options())

        raw = executor.execute(operation)

        if raw.objects:
            value = convert(self.converter, raw.objects)
        else:
            value = None

        return Response(raw.not_found, raw.unchanged, value, raw.vclock)


# end of class FetchValue



class Response(Generic[T]):
    """ A fetch result: the not-found and unchanged flags, the vector clock
        if the store returned one, and the converted values. If no converter
        was given the values are :class:`kvcmd.stored.StoredObject` instances.

        The value is absent when the store returned no objects, as happens
        for a missing key or an unchanged conditional fetch; it is otherwise
        a list with one entry per sibling, in the order the store returned
        them.
    """

    __slots__ = ('_not_found', '_unchanged', '_value', '_vclock')

    def __init__(self, not_found: bool, unchanged: bool, value: Optional[List[T]], vclock: Optional[VClock]):

        self._not_found = bool(not_found)
        self._unchanged = bool(unchanged)
        self._value = None if value is None else tuple(value)
        self._vclock = vclock


    def __repr__(self):
        return 'Response(not_found=%r, unchanged=%r, value=%r, vclock=%r)' % (
            self._not_found, self._unchanged, self.get_value(), self._vclock)


    def is_not_found(self) -> bool:
        return self._not_found


    def is_unchanged(self) -> bool:
        return self._unchanged


    def has_vclock(self) -> bool:
        return self._vclock is not None


    def get_vclock(self) -> Optional[VClock]:
        return self._vclock


    def has_value(self) -> bool:
        return self._value is not None


    def get_value(self) -> Optional[List[T]]:
        """ Return a fresh list of the converted values, or None if there
            are none.
        """

        if self._value is None:
            return None
        return list(self._value)


# end of class Response



def _quorum(value) -> Quorum:

    if isinstance(value, Quorum):
        return value

    if isinstance(value, bool) or not isinstance(value, int):
        raise options.ConfigurationError('a quorum must be a Quorum or an int, not ' + type(value).__name__)

    try:
        return Quorum(value)
    except ValueError as error:
        raise options.ConfigurationError(str(error)) from error



def fetch(location: Location, converter=None) -> FetchValue:
    """ Factory method for a :class:`FetchValue` command. With no *converter*
        the response values are the raw :class:`kvcmd.stored.StoredObject`
        instances; otherwise *converter* is applied to each of them. A plain
        callable is accepted as a converter.
    """

    if not isinstance(location, Location):
        raise TypeError('fetch() requires a Location, not ' + type(location).__name__)

    return FetchValue(location, as_converter(converter))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
