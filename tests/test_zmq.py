import kvcmd
import pytest
import threading
import time
import zmq

from kvcmd.protocol import FetchResponse, fields, wire
from kvcmd.stored import StoredObject
from kvcmd.transport import zmq as kvzmq


class Failing:
    def execute(self, operation):
        raise KeyError('backend exploded')


class Slow:
    def execute(self, operation):
        time.sleep(0.5)
        return kvcmd.protocol.FetchResponse(not_found=True)


@pytest.fixture
def served(memory):

    server = kvzmq.Server(memory)
    client = kvzmq.Client('127.0.0.1', server.port, timeout=5)

    yield memory, client

    client.close()
    server.close()


def test_fetch(served, location):

    memory, client = served
    vclock = memory.put(location, StoredObject(value=b'{"name": "Ada"}', content_type='application/json'))

    response = kvcmd.fetch(location, kvcmd.convert.JSONConverter()).with_r(2).execute(client)

    assert response.get_value() == [{'name': 'Ada'}]
    assert response.get_vclock() == vclock


def test_not_found(served, location):

    memory, client = served
    response = kvcmd.fetch(location).execute(client)

    assert response.is_not_found()
    assert not response.has_value()


def test_conditional_fetch(served, location):

    memory, client = served
    vclock = memory.put(location, StoredObject(value=b'1'))

    response = kvcmd.fetch(location).with_if_modified(vclock).with_timeout(2000).execute(client)
    assert response.is_unchanged()


def test_remote_error(location):

    server = kvzmq.Server(Failing())
    client = kvzmq.Client('127.0.0.1', server.port, timeout=5)

    try:
        with pytest.raises(kvcmd.transport.RemoteError) as raised:
            kvcmd.fetch(location).execute(client)
    finally:
        client.close()
        server.close()

    assert raised.value.error_type == 'KeyError'


def test_timeout(location):

    server = kvzmq.Server(Slow())
    client = kvzmq.Client('127.0.0.1', server.port)

    try:
        with pytest.raises(kvcmd.transport.TransportTimeout):
            kvcmd.fetch(location).with_timeout(50).execute(client)
    finally:
        client.close()
        server.close()


def test_fixed_port_in_use(memory):

    server = kvzmq.Server(memory)

    try:
        with pytest.raises(kvcmd.transport.TransportPortError):
            kvzmq.Server(memory, port=server.port)
    finally:
        server.close()


def test_client_cache():

    first = kvzmq.client('127.0.0.1', 13600)
    second = kvzmq.client('127.0.0.1', '13600')

    assert first is second

def test_malformed_reply(location):

    router = kvzmq.request.zmq_context.socket(zmq.ROUTER)
    router.setsockopt(zmq.LINGER, 0)
    port = router.bind_to_random_port('tcp://127.0.0.1')

    def answer():
        replies = (b'[]', None)
        for payload in replies:
            if not router.poll(5000):
                return
            identity, version, msg_id = router.recv_multipart()[:3]
            if payload is None:
                frames = wire.encode_response(FetchResponse(not_found=True), msg_id)
            else:
                frames = (fields.VERSION, msg_id, fields.REP, payload, b'')
            router.send_multipart((identity,) + tuple(frames))

    thread = threading.Thread(target=answer, daemon=True)
    thread.start()

    client = kvzmq.Client('127.0.0.1', port, timeout=5)

    try:
        with pytest.raises(kvcmd.transport.RemoteError) as raised:
            kvcmd.fetch(location).execute(client)

        assert raised.value.error_type == 'WireError'
        assert client.thread.is_alive()

        response = kvcmd.fetch(location).execute(client)
        assert response.is_not_found()
    finally:
        thread.join()
        client.close()
        router.close()


def test_reply_handler_failure(served, location, monkeypatch):

    memory, client = served
    decode_response = wire.decode_response
    calls = []

    def fail_once(parts):
        calls.append(parts)
        if len(calls) == 1:
            raise AttributeError('unexpected reply')
        return decode_response(parts)

    monkeypatch.setattr(wire, 'decode_response', fail_once)

    with pytest.raises(kvcmd.transport.TransportTimeout):
        kvcmd.fetch(location).with_timeout(500).execute(client)

    assert client.thread.is_alive()
    assert kvcmd.fetch(location).execute(client).is_not_found()


def test_closed_client(monkeypatch, location):

    monkeypatch.setattr(kvcmd.config, 'transport', 'zmq')

    first = kvzmq.client('127.0.0.1', 13602)
    first.close()

    with pytest.raises(kvcmd.transport.TransportConnectionError):
        kvcmd.fetch(location).execute(first)

    second = kvzmq.client('127.0.0.1', 13602)
    assert kvcmd.connect('127.0.0.1', 13602) is second

    try:
        assert second is not first
        assert second.shutdown == False
    finally:
        second.close()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
