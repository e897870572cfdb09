''' Encoding and decoding for the JSON body of a message frame. Several
    libraries can do the job; :func:`select` picks the first one from
    :data:`preference` that can be imported, and its functions are exposed
    here as :func:`dumps` and :func:`loads`. Every :func:`dumps` returns
    bytes, and every :func:`loads` failure raises :class:`DecodeError` of
    the selected library. The selected library is named in :data:`backend`.
'''

import collections
import importlib

preference = ('msgspec', 'orjson', 'json')

Codec = collections.namedtuple('Codec', ('name', 'dumps', 'loads', 'DecodeError'))


def _msgspec_codec():
    msgspec = importlib.import_module('msgspec')

    encoder = msgspec.json.Encoder()
    decoder = msgspec.json.Decoder()
    return Codec('msgspec', encoder.encode, decoder.decode, msgspec.DecodeError)


def _orjson_codec():
    orjson = importlib.import_module('orjson')
    return Codec('orjson', orjson.dumps, orjson.loads, orjson.JSONDecodeError)


def _stdlib_codec():
    stdlib = importlib.import_module('json')

    def dumps(value):
        return stdlib.dumps(value, separators=(',', ':')).encode()

    return Codec('json', dumps, stdlib.loads, stdlib.JSONDecodeError)


_codecs = {
    'msgspec': _msgspec_codec,
    'orjson': _orjson_codec,
    'json': _stdlib_codec,
}


def select(names=preference):
    ''' Return the :class:`Codec` for the first library in *names* that
        imports. Libraries after that one are never loaded.
    '''

    for name in names:
        try:
            factory = _codecs[name]
        except KeyError:
            raise ValueError('unknown JSON library: ' + repr(name))

        try:
            return factory()
        except ImportError:
            continue

    raise ImportError('none of these JSON libraries are available: ' + ', '.join(names))


_selected = select()

backend = _selected.name
dumps = _selected.dumps
loads = _selected.loads
DecodeError = _selected.DecodeError


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
