import kvcmd
import pytest

from kvcmd import convert
from kvcmd.stored import StoredObject


class User:
    def __init__(self, name, age):
        self.name = name
        self.age = age


def from_dict(decoded):
    return User(**decoded)


def test_pass_through():

    stored = StoredObject(value=b'raw')
    assert convert.PassThroughConverter().convert(stored) is stored


def test_function_converter():

    converter = convert.FunctionConverter(lambda stored: len(stored.value))
    assert converter.convert(StoredObject(value=b'four')) == 4

    with pytest.raises(TypeError):
        convert.FunctionConverter('not callable')


def test_string_converter():

    assert convert.StringConverter().convert(StoredObject(value=b'caf\xc3\xa9')) == 'café'

    latin = StoredObject(value=b'caf\xe9', charset='latin-1')
    assert convert.StringConverter().convert(latin) == 'café'
    assert convert.StringConverter('latin-1').convert(StoredObject(value=b'caf\xe9')) == 'café'

    with pytest.raises(convert.ConversionError):
        convert.StringConverter().convert(StoredObject(value=b'\xff\xfe\xfa'))


def test_json_converter():

    stored = StoredObject(value=b'{"name": "Ada", "age": 36}', content_type='application/json')

    assert convert.JSONConverter().convert(stored) == {'name': 'Ada', 'age': 36}

    user = convert.JSONConverter(from_dict).convert(stored)
    assert isinstance(user, User)
    assert user.name == 'Ada'
    assert user.age == 36


def test_json_converter_head_only():

    def exploding(decoded):
        raise AssertionError('the factory should not be called')

    head = StoredObject(content_type='application/json')
    assert convert.JSONConverter(exploding).convert(head) is None


def test_json_converter_errors():

    with pytest.raises(convert.ConversionError) as raised:
        convert.JSONConverter().convert(StoredObject(value=b'{broken'))

    assert raised.value.__cause__ is not None

    missing_field = StoredObject(value=b'{"name": "Ada"}')

    with pytest.raises(convert.ConversionError):
        convert.JSONConverter(from_dict).convert(missing_field)


def test_as_converter():

    assert isinstance(convert.as_converter(None), convert.PassThroughConverter)

    string = convert.StringConverter()
    assert convert.as_converter(string) is string

    wrapped = convert.as_converter(len)
    assert isinstance(wrapped, convert.FunctionConverter)

    with pytest.raises(TypeError):
        convert.as_converter(3.5)


def test_convert_preserves_order():

    values = [StoredObject(value=str(number).encode()) for number in range(10)]
    converted = convert.convert(convert.StringConverter(), values)

    assert converted == [str(number) for number in range(10)]


def test_convert_propagates():

    class Failing(convert.Converter):
        def convert(self, stored):
            raise RuntimeError('nope')

    with pytest.raises(RuntimeError):
        convert.convert(Failing(), [StoredObject()])


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
