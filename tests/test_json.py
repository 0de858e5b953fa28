import json
import kvcmd
import pytest


def test_json_encode_and_decode():
    encode_and_decode(json.dumps, json.loads, dump_is_bytes=False)


def test_kvcmd_encode_and_decode():
    encode_and_decode(kvcmd.json.dumps, kvcmd.json.loads)


def test_decode_error():

    with pytest.raises(kvcmd.json.DecodeError):
        kvcmd.json.loads(b'{not json')


def test_backend_is_msgspec():

    # msgspec is a declared dependency, so it is always the one picked.
    assert kvcmd.json.backend == 'msgspec'


def encode_and_decode(dumps, loads, dump_is_bytes=True):

    input_dictionary = dict()
    input_dictionary['list'] = [1, 2, 3, 'a', 'b', None, 'c', 'z']
    input_dictionary['dict'] = {'one': 1, 'two': 2}
    input_dictionary['none'] = None
    input_dictionary['true'] = True
    input_dictionary['false'] = False

    encoded = dumps(input_dictionary)

    if dump_is_bytes:
        assert isinstance(encoded, bytes)
    else:
        assert isinstance(encoded, str)

    # Whitespace handling varies between the libraries kvcmd.json may pick,
    # so only the decoded form is compared.

    decoded = loads(encoded)
    assert isinstance(decoded, dict)
    assert decoded == input_dictionary


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
