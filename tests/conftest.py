import kvcmd
import pytest


class RecordingBuilder(kvcmd.protocol.FetchOperation.Builder):
    """ An operation builder that remembers every setter invoked on it, in
        the order invoked.
    """

    def __init__(self, bucket, key):
        kvcmd.protocol.FetchOperation.Builder.__init__(self, bucket, key)
        self.calls = list()

    def __getattribute__(self, name):
        attribute = object.__getattribute__(self, name)

        if name.startswith('with_'):
            calls = object.__getattribute__(self, 'calls')

            def recorded(value):
                calls.append((name, value))
                return attribute(value)

            return recorded

        return attribute

    def setters(self):
        return [name for name, value in self.calls]


class FakeExecutor:
    """ Hands back a canned raw response, or raises a canned error, and keeps
        every builder and operation it saw.
    """

    def __init__(self, response=None, error=None):
        if response is None:
            response = kvcmd.protocol.FetchResponse()

        self.response = response
        self.error = error
        self.builders = list()
        self.operations = list()

    def builder(self, bucket, key):
        builder = RecordingBuilder(bucket, key)
        self.builders.append(builder)
        return builder

    def execute(self, operation):
        self.operations.append(operation)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def location():
    return kvcmd.Location('users', '42')


@pytest.fixture
def fake_executor():
    return FakeExecutor


@pytest.fixture
def memory():
    return kvcmd.transport.MemoryExecutor()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
