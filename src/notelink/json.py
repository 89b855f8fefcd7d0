''' Wrapper module to select the most performant available library to handle
    the equivalent of :func:`json.loads` and :func:`json.dumps`. Everything
    that goes on the wire to the module, and everything that comes back,
    passes through here.
'''

# The business about conditionally importing the libraries is intended to
# avoid importing less efficient libraries if they are not available. With
# the right build process this could be determined at build time, instead
# of at run time.

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


# The msgspec 'encode' operation returns bytes, as does orjson.dumps. To
# maintain alignment all 'dumps' methods need to do so as well. The same
# holds for pretty(), used for debug output, and canonical(), which sorts
# object keys so that equal values always encode identically.

def json_dumps(*args, **kwargs):
    return json.dumps(*args, separators=(',', ':'), **kwargs).encode()

def json_pretty(thing):
    return json.dumps(thing, indent=4).encode()

def json_canonical(thing):
    return json_dumps(thing, sort_keys=True)


def msgspec_pretty(thing):
    return msgspec.json.format(msgspec.json.encode(thing), indent=4)

def msgspec_canonical(thing):
    return msgspec.json.encode(thing, order='sorted')


def orjson_pretty(thing):
    return orjson.dumps(thing, option=orjson.OPT_INDENT_2)

def orjson_canonical(thing):
    return orjson.dumps(thing, option=orjson.OPT_SORT_KEYS)


if msgspec is not None:
    encoder = msgspec.json.Encoder()
    decoder = msgspec.json.Decoder()
    dumps = encoder.encode
    loads = decoder.decode
    pretty = msgspec_pretty
    canonical = msgspec_canonical
    DecodeError = msgspec.DecodeError
elif orjson is not None:
    dumps = orjson.dumps
    loads = orjson.loads
    pretty = orjson_pretty
    canonical = orjson_canonical
    DecodeError = orjson.JSONDecodeError
else:
    dumps = json_dumps
    loads = json.loads
    pretty = json_pretty
    canonical = json_canonical
    DecodeError = json.JSONDecodeError

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
