""" Serve a small in-memory store over ZeroMQ and fetch from it, converting
    the stored JSON into domain objects.
"""

import kvcmd
from kvcmd.transport import zmq


class User:

    def __init__(self, name, email):
        self.name = name
        self.email = email

    def __repr__(self):
        return 'User(%r, %r)' % (self.name, self.email)


def from_json(decoded):
    return User(decoded['name'], decoded['email'])


def main():

    memory = kvcmd.transport.MemoryExecutor()
    server = zmq.Server(memory)

    location = kvcmd.Location('users', '42')
    stored = kvcmd.StoredObject(value=b'{"name": "Ada", "email": "ada@example.org"}',
                                content_type='application/json')
    memory.put(location, stored)

    client = zmq.client('127.0.0.1', server.port)
    command = kvcmd.fetch(location, kvcmd.convert.JSONConverter(from_json))
    command.with_r(kvcmd.Quorum.quorum()).with_timeout(5000)

    response = command.execute(client)

    if response.is_not_found():
        print('no such user')
    else:
        print(response.get_value(), response.get_vclock())

        # Asking again with the clock we were given returns no body.
        again = command.with_if_modified(response.get_vclock()).execute(client)
        print('unchanged:', again.is_unchanged())

    client.close()
    server.close()


if __name__ == '__main__':
    main()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
