"""Executor interface.

This is the (small) contract that anything able to carry out a fetch should
follow. It lives outside :mod:`kvcmd.protocol` so the protocol remains
transport-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..protocol.fetch import FetchOperation, FetchResponse


# Transport agnostic exceptions

class TransportError(Exception):
    """Base class for all transport-layer errors."""


class TransportTimeout(TransportError):
    """A request did not receive a timely response."""


class TransportConnectionError(TransportError):
    """The transport could not establish or maintain a connection."""


class TransportPortError(TransportError):
    """No suitable port could be bound or connected."""


class RemoteError(TransportError):
    """The remote side failed while handling the request."""

    def __init__(self, error_type: str, text: str):
        super().__init__(f"{error_type}: {text}")
        self.error_type = error_type
        self.text = text


class Executor(ABC):
    """Minimal contract for something that carries out fetch operations."""

    def builder(self, bucket: bytes, key: bytes) -> FetchOperation.Builder:
        """Return a fresh operation builder for *bucket* and *key*."""
        return FetchOperation.Builder(bucket, key)

    @abstractmethod
    def execute(self, operation: FetchOperation) -> FetchResponse:
        """Carry out *operation*, blocking until the response is available."""

    def close(self) -> None:
        """Release any resources held by the executor."""
