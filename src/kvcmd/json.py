''' JSON for wire payloads and stored object bodies. Uses msgspec when it is
    installed, then orjson, then the standard library; :func:`dumps` always
    returns bytes and :data:`DecodeError` is whatever :func:`loads` raises
    on malformed input.
'''

msgspec = None
orjson = None
json = None

try:
    import msgspec
except ImportError:
    pass

if msgspec is None:
    try:
        import orjson
    except ImportError:
        pass

if msgspec is None and orjson is None:
    import json


def _stdlib_dumps(*args, **kwargs):
    return json.dumps(*args, **kwargs).encode()

if msgspec is not None:
    backend = 'msgspec'
    dumps = msgspec.json.Encoder().encode
    loads = msgspec.json.Decoder().decode
    DecodeError = msgspec.DecodeError
elif orjson is not None:
    backend = 'orjson'
    dumps = orjson.dumps
    loads = orjson.loads
    DecodeError = orjson.JSONDecodeError
else:
    backend = 'json'
    dumps = _stdlib_dumps
    loads = json.loads
    DecodeError = json.JSONDecodeError

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
