import kvcmd
import pytest

from kvcmd.stored import StoredObject


def test_not_found(memory, location):

    response = kvcmd.fetch(location).execute(memory)

    assert response.is_not_found()
    assert not response.has_value()
    assert not response.has_vclock()


def test_put_and_fetch(memory, location):

    stored = StoredObject(value=b'{"name": "Ada"}', content_type='application/json')
    vclock = memory.put(location, stored)

    response = kvcmd.fetch(location).execute(memory)

    assert not response.is_not_found()
    assert response.get_vclock() == vclock

    value = response.get_value()
    assert len(value) == 1
    assert value[0].value == stored.value
    assert value[0].content_type == 'application/json'
    assert value[0].last_modified is not None


def test_vclock_advances(memory, location):

    first = memory.put(location, StoredObject(value=b'1'))
    second = memory.put(location, StoredObject(value=b'2'))

    assert first != second
    assert kvcmd.json.loads(first.bytes) == {'memory': 1}
    assert kvcmd.json.loads(second.bytes) == {'memory': 2}


def test_siblings(memory, location):

    memory.put(location, StoredObject(value=b'a'), StoredObject(value=b'b'))
    response = kvcmd.fetch(location, kvcmd.convert.StringConverter()).execute(memory)

    assert response.get_value() == ['a', 'b']


def test_bucket_types_are_separate(memory):

    default = kvcmd.Location('users', '42')
    other = kvcmd.Location('users', '42', bucket_type='archive')

    memory.put(default, StoredObject(value=b'x'))

    assert kvcmd.fetch(other).execute(memory).is_not_found()


def test_head_only(memory, location):

    memory.put(location, StoredObject(value=b'body', user_meta={'owner': 'ada'}))
    response = kvcmd.fetch(location).with_head().execute(memory)

    stored = response.get_value()[0]
    assert stored.value == b''
    assert stored.user_meta == {'owner': 'ada'}


def test_if_modified(memory, location):

    vclock = memory.put(location, StoredObject(value=b'1'))

    response = kvcmd.fetch(location).with_if_modified(vclock).execute(memory)
    assert response.is_unchanged()
    assert not response.has_value()

    memory.put(location, StoredObject(value=b'2'))

    response = kvcmd.fetch(location).with_if_modified(vclock).execute(memory)
    assert not response.is_unchanged()
    assert response.get_value()[0].value == b'2'


def test_tombstone(memory, location):

    assert memory.delete(location) is None

    memory.put(location, StoredObject(value=b'1'))
    tombstone = memory.delete(location)

    response = kvcmd.fetch(location).execute(memory)
    assert response.is_not_found()
    assert not response.has_vclock()

    response = kvcmd.fetch(location).with_deleted_vclock().execute(memory)
    assert response.is_not_found()
    assert response.get_vclock() == tombstone


def test_put_requires_object(memory, location):

    with pytest.raises(ValueError):
        memory.put(location)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
