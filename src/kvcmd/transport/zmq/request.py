"""ZeroMQ request/response transport.

A :class:`Client` is an executor: it encodes each fetch operation with
:mod:`kvcmd.protocol.wire`, sends it over a DEALER socket, and blocks until
the matching reply arrives. A :class:`Server` accepts those requests on a
ROUTER socket and answers them from any other executor, typically a
:class:`kvcmd.transport.memory.MemoryExecutor`.

Each end runs one background thread that owns its sockets; other threads
hand it outgoing frames through a queue and an inproc signal socket.
"""

from __future__ import annotations

import concurrent.futures
import logging
import queue
import threading
from typing import Dict, Optional, Sequence, Tuple

import zmq

from ... import config
from ...protocol import wire
from ...protocol.fetch import FetchOperation, FetchResponse
from ..base import (
    Executor,
    RemoteError,
    TransportConnectionError,
    TransportPortError,
    TransportTimeout,
)


minimum_port = 10079
maximum_port = 13679
zmq_context = zmq.Context.instance()

logger = logging.getLogger(__name__)


class PendingRequest:
    """Client-side helper that lets a caller wait for its reply."""

    def __init__(self, msg_id: bytes):
        self.id = msg_id
        self.error: Optional[dict] = None
        self.response: Optional[FetchResponse] = None
        self.rep_event = threading.Event()

    def wait(self, timeout: Optional[float]) -> bool:
        return self.rep_event.wait(timeout)

    def _complete(self, error: Optional[dict], response: Optional[FetchResponse]) -> None:
        self.error = error
        self.response = response
        self.rep_event.set()


class _Signalled:
    """A socket-owning background thread fed by a queue plus inproc signal."""

    poll_interval = 100     # milliseconds

    def _start_signal(self, name: str) -> None:
        self._outbox = queue.SimpleQueue()

        internal = f"inproc://{name}:signal:{id(self)}"
        self._signal_rx = zmq_context.socket(zmq.PAIR)
        self._signal_rx.bind(internal)
        self._signal_tx = zmq_context.socket(zmq.PAIR)
        self._signal_tx.connect(internal)
        self._signal_lock = threading.Lock()

        self.shutdown = False
        self.thread = threading.Thread(target=self.run, daemon=True)
        self.thread.start()

    def _enqueue(self, frames: Sequence[bytes]) -> None:
        self._outbox.put(tuple(frames))
        with self._signal_lock:
            self._signal_tx.send(b"")

    def _send_one(self) -> None:
        # Clear one signal and send one message.
        self._signal_rx.recv(flags=zmq.NOBLOCK)
        frames = self._outbox.get(block=False)
        self.socket.send_multipart(frames)

    def _incoming(self, parts: Tuple[bytes, ...]) -> None:
        raise NotImplementedError

    def run(self) -> None:
        poller = zmq.Poller()
        poller.register(self.socket, zmq.POLLIN)
        poller.register(self._signal_rx, zmq.POLLIN)

        while not self.shutdown:
            for active, _flag in poller.poll(self.poll_interval):
                if active == self._signal_rx:
                    self._send_one()
                elif active == self.socket:
                    parts = tuple(self.socket.recv_multipart())
                    try:
                        self._incoming(parts)
                    except Exception:
                        # One bad message must not take down the socket thread.
                        logger.exception("failed to handle incoming message")

        self.socket.close()
        self._signal_rx.close()

    def close(self) -> None:
        if self.shutdown:
            return

        self.shutdown = True
        self.thread.join()

        with self._signal_lock:
            self._signal_tx.close()


class Client(_Signalled, Executor):
    """Issue fetch operations via a ZeroMQ DEALER socket. If *timeout* is
    None the configured default (:data:`kvcmd.config.timeout`) applies to
    operations that carry no timeout of their own.
    """

    def __init__(self, address: str, port: int, timeout: Optional[float] = None):
        self.address = address
        self.port = int(port)
        self.timeout = config.timeout if timeout is None else float(timeout)

        server = f"tcp://{address}:{self.port}"
        identity = f"request.Client.{id(self)}".encode()

        self.socket = zmq_context.socket(zmq.DEALER)
        self.socket.setsockopt(zmq.LINGER, 0)
        self.socket.identity = identity
        self.socket.connect(server)

        self._pending: Dict[bytes, PendingRequest] = {}
        self._start_signal("request.Client")

    def _incoming(self, parts: Tuple[bytes, ...]) -> None:
        try:
            msg_id, error, response = wire.decode_response(parts)
        except wire.WireError as exc:
            if len(parts) < 2:
                logger.warning("discarding malformed reply from %s:%d: %s", self.address, self.port, exc)
                return
            msg_id = parts[1]
            error = {"type": "WireError", "text": str(exc)}
            response = None

        pending = self._pending.pop(msg_id, None)
        if pending is None:
            # The original caller gave up waiting.
            logger.debug("discarding late reply %r", msg_id)
            return

        pending._complete(error, response)

    def execute(self, operation: FetchOperation) -> FetchResponse:
        if self.shutdown:
            raise TransportConnectionError(
                f"FETCH @ {self.address}:{self.port}: client is closed"
            )

        msg_id = wire.next_id()
        frames = wire.encode_request(operation, msg_id)

        if operation.timeout is None:
            timeout = self.timeout
        else:
            timeout = operation.timeout / 1000.0

        pending = PendingRequest(msg_id)
        self._pending[msg_id] = pending

        logger.debug("FETCH %r -> %s:%d", msg_id, self.address, self.port)

        try:
            self._enqueue(frames)
        except zmq.ZMQError as exc:
            self._pending.pop(msg_id, None)
            raise TransportConnectionError(
                f"FETCH @ {self.address}:{self.port}: {exc}"
            ) from exc

        if not pending.wait(timeout):
            self._pending.pop(msg_id, None)
            raise TransportTimeout(
                f"FETCH @ {self.address}:{self.port}: no reply in {timeout:.2f} sec"
            )

        if pending.error is not None:
            raise RemoteError(pending.error.get("type", "Exception"), pending.error.get("text", ""))

        return pending.response

    def close(self) -> None:
        with _client_lock:
            if _client_cache.get((self.address, self.port)) is self:
                del _client_cache[(self.address, self.port)]

        super().close()


class Server(_Signalled):
    """Receive fetch requests via a ZeroMQ ROUTER socket, and answer them
    using *backend*, any object with an ``execute(operation)`` method.
    If no *port* is given the first free port in the default range is used.
    """

    worker_count = 8

    def __init__(self, backend, address: str = "127.0.0.1", port: Optional[int] = None, avoid: Optional[set] = None):
        self.backend = backend
        self.address = address
        self.avoid = set(avoid or set())

        self.socket = zmq_context.socket(zmq.ROUTER)
        self.socket.setsockopt(zmq.LINGER, 0)

        if port is None:
            self.port = self._bind_any()
        else:
            self.port = int(port)
            try:
                self.socket.bind(f"tcp://{self.address}:{self.port}")
            except zmq.ZMQError as exc:
                self.socket.close()
                raise TransportPortError(f"port already in use: {self.port}") from exc

        self.workers = concurrent.futures.ThreadPoolExecutor(max_workers=self.worker_count)
        self._start_signal("request.Server")

    def _bind_any(self) -> int:
        for port in range(minimum_port, maximum_port + 1):
            if port in self.avoid:
                continue
            try:
                self.socket.bind(f"tcp://{self.address}:{port}")
                return port
            except zmq.ZMQError:
                continue

        self.socket.close()
        raise TransportPortError(
            f"no ports available in range {minimum_port}:{maximum_port}"
        )

    def _incoming(self, parts: Tuple[bytes, ...]) -> None:
        try:
            self.workers.submit(self._handle, parts)
        except RuntimeError:
            # The worker pool is shutting down; close() is in progress.
            logger.warning("server closing, dropping request")

    def _handle(self, parts: Tuple[bytes, ...]) -> None:
        # ROUTER sockets prepend the sender's identity frame.
        identity, request = parts[:1], parts[1:]

        if len(request) < 2:
            logger.warning("discarding malformed request (%d frames)", len(request))
            return

        msg_id = request[1]

        try:
            msg_id, operation = wire.decode_request(request)
            response = self.backend.execute(operation)
            frames = wire.encode_response(response, msg_id)
        except Exception as exc:
            logger.exception("FETCH %r failed", msg_id)
            frames = wire.encode_error(msg_id, type(exc).__name__, str(exc))

        self._enqueue(identity + frames)

    def close(self) -> None:
        # Let in-flight requests queue their replies before the socket goes.
        self.workers.shutdown(wait=True)
        super().close()


# --- convenience helpers ---

_client_cache: Dict[Tuple[str, int], Client] = {}
_client_lock = threading.Lock()


def client(address: str, port: int) -> Client:
    """Return the cached :class:`Client` for *address* and *port*."""

    key = (address, int(port))
    with _client_lock:
        c = _client_cache.get(key)
        if c is None:
            c = Client(address, int(port))
            _client_cache[key] = c
        return c
