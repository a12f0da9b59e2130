import json

MIN_INT = -(2 ** 63)
MAX_INT = 2 ** 63 - 1

##
# ENCODER CLASS
# Add to this to encode Python types for storage.
# Token ids range up to 2 ** 256 - 1, so anything past 64 bits is stored as a string.
##


class Encoder(json.JSONEncoder):
    def default(self, o, *args):
        if isinstance(o, bytes):
            return {
                '__bytes__': o.hex()
            }
        return super().default(o)


def encode_int(value: int):
    if MIN_INT < value < MAX_INT:
        return value

    return {
        '__big_int__': str(value)
    }


def encode_ints(data):
    if isinstance(data, bool):
        return data
    elif isinstance(data, int):
        return encode_int(data)
    elif isinstance(data, dict):
        return {k: encode_ints(v) for k, v in data.items()}
    elif isinstance(data, (list, tuple)):
        return [encode_ints(i) for i in data]
    return data


# JSON library from Python 3 doesn't let you instantiate your custom Encoder. You have to pass it as an obj to json
def encode(data):
    """ NOTE:
    Normally encoding behavior is overriden in 'default' method inside
    a class derived from json.JSONEncoder. Unfortunately this can be done only
    for custom types, so big integers are preprocessed here.
    """
    return json.dumps(encode_ints(data), cls=Encoder, separators=(',', ':'))


def as_object(d):
    if '__bytes__' in d:
        return bytes.fromhex(d['__bytes__'])
    elif '__big_int__' in d:
        return int(d['__big_int__'])
    return dict(d)


# Decode has a hook for JSON objects, which are just Python dictionaries. You have to specify the logic in this hook.
def decode(data):
    if data is None:
        return None

    if isinstance(data, bytes):
        data = data.decode()

    try:
        return json.loads(data, object_hook=as_object)
    except json.decoder.JSONDecodeError:
        return None


def encode_kv(key, value):
    k = key.encode()
    v = encode(value).encode()
    return k, v
