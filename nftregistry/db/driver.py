from nftregistry.db.encoder import encode_kv, decode
from nftregistry.db import hdf5
from nftregistry import config
from nftregistry.logger import get_logger
from pathlib import Path
import shutil
import os

logger = get_logger('Driver')

STORAGE_HOME = Path(config.STORAGE_HOME) if config.STORAGE_HOME else Path().home().joinpath('.nftregistry')

# DB maps bytes to bytes
# Driver maps string to python object


class InMemDriver:
    def __init__(self):
        self.db = {}

    def get(self, item: str):
        res = self.db.get(item.encode())
        if res is None:
            return None
        return decode(res)

    def set(self, key: str, value):
        if value is None:
            self.__delitem__(key)
        else:
            k, v = encode_kv(key, value)
            self.db[k] = v

    def delete(self, key: str):
        self.__delitem__(key)

    def iter(self, prefix: str, length=0):
        p = prefix.encode()

        l = []
        for k in sorted(self.db.keys()):
            if k.startswith(p):
                l.append(k.decode())
            if 0 < length <= len(l):
                break

        return l

    def keys(self):
        return sorted([k.decode() for k in self.db.keys()])

    def flush(self):
        self.db.clear()

    def __getitem__(self, item: str):
        value = self.get(item)
        if value is None:
            raise KeyError(item)
        return value

    def __setitem__(self, key: str, value):
        self.set(key, value)

    def __delitem__(self, key: str):
        self.db.pop(key.encode(), None)


class FSDriver:
    """
    Persists state in HDF5 files under ``root``. The namespace part of a key
    (before the index separator) names the file, the rest becomes a group path.
    """
    def __init__(self, root=None):
        self.root = Path(root) if root is not None else STORAGE_HOME
        logger.debug(f'Using root {self.root}')
        self.root.mkdir(exist_ok=True, parents=True)

    def __parse_key(self, key):
        if config.INDEX_SEPARATOR in key:
            filename, variable = key.split(config.INDEX_SEPARATOR, 1)
        else:
            filename, variable = '__misc', key

        return filename, variable.replace(config.DELIMITER, config.HDF5_GROUP_SEPARATOR)

    def __filename_to_path(self, filename):
        return str(self.root.joinpath(filename))

    def __get_keys_from_file(self, filename):
        return [
            filename + config.INDEX_SEPARATOR + g.replace(config.HDF5_GROUP_SEPARATOR, config.DELIMITER)
            for g in hdf5.get_groups(self.__filename_to_path(filename))
        ]

    def get(self, item: str):
        filename, variable = self.__parse_key(item)
        if len(filename) >= config.FILENAME_LEN_MAX:
            return None

        return hdf5.get_value(self.__filename_to_path(filename), variable)

    def set(self, key: str, value):
        if value is None:
            self.delete(key)
            return

        filename, variable = self.__parse_key(key)
        if len(filename) < config.FILENAME_LEN_MAX:
            hdf5.set_value(self.__filename_to_path(filename), variable, value)

    def delete(self, key: str):
        filename, variable = self.__parse_key(key)
        if len(filename) < config.FILENAME_LEN_MAX:
            hdf5.del_value(self.__filename_to_path(filename), variable)

    def iter(self, prefix='', length=0):
        if config.INDEX_SEPARATOR not in prefix:
            return self.keys(prefix=prefix, length=length)

        filename, _ = self.__parse_key(prefix)

        keys = sorted(k for k in self.__get_keys_from_file(filename) if k.startswith(prefix))
        return keys if length == 0 else keys[:length]

    def keys(self, prefix='', length=0):
        keys = []
        for filename in sorted(os.listdir(self.root)):
            keys.extend(k for k in self.__get_keys_from_file(filename) if k.startswith(prefix))

        keys.sort()
        return keys if length == 0 else keys[:length]

    def flush(self):
        if self.root.is_dir():
            shutil.rmtree(self.root)
        self.root.mkdir(exist_ok=True, parents=True)

    def __getitem__(self, key):
        return self.get(key)

    def __setitem__(self, key, value):
        self.set(key, value)

    def __delitem__(self, key):
        self.delete(key)


class CacheDriver:
    def __init__(self, driver=None):
        self.pending_writes = {}  # L2 cache
        self.cache = {}  # L1 cache
        self.driver = driver if driver is not None else InMemDriver()  # L0 cache

    def find(self, key: str):
        # A pending write of None is a delete and shadows the lower layers
        if key in self.pending_writes:
            return self.pending_writes[key]

        if key in self.cache:
            return self.cache[key]

        value = self.driver.get(key)
        self.cache[key] = value
        return value

    def get(self, key: str):
        return self.find(key)

    def set(self, key, value):
        self.pending_writes[key] = value

    def delete(self, key):
        self.set(key, None)

    def commit(self):
        for k, v in self.pending_writes.items():
            if v is None:
                self.driver.delete(k)
            else:
                self.driver.set(k, v)

            self.cache[k] = v

        self.pending_writes.clear()

    def rollback(self):
        # Returns to the state of the backing driver as of the last commit
        self.cache.clear()
        self.pending_writes.clear()

    def clear_pending_state(self):
        self.rollback()


class LedgerDriver(CacheDriver):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.delimiter = config.INDEX_SEPARATOR

    def items(self, prefix=''):
        # Stored keys first, then overlay the cache and the pending writes
        _items = {k: None for k in self.driver.iter(prefix=prefix)}

        for k, v in self.cache.items():
            if k.startswith(prefix):
                _items[k] = v

        for k, v in self.pending_writes.items():
            if k.startswith(prefix):
                _items[k] = v

        for k in [k for k in _items if k not in self.cache and k not in self.pending_writes]:
            _items[k] = self.get(k)

        return {k: v for k, v in sorted(_items.items()) if v is not None}

    def keys(self, prefix=''):
        return list(self.items(prefix).keys())

    def values(self, prefix=''):
        return list(self.items(prefix).values())

    def make_key(self, namespace, variable, args=[]):
        namespace_variable = self.delimiter.join((namespace, variable))
        if args:
            return config.DELIMITER.join((namespace_variable, *[str(arg) for arg in args]))
        return namespace_variable

    def get_var(self, namespace, variable, arguments=[]):
        key = self.make_key(namespace, variable, arguments)
        return self.get(key)

    def set_var(self, namespace, variable, arguments=[], value=None):
        key = self.make_key(namespace, variable, arguments)
        self.set(key, value)

    def get_meta(self, namespace, key):
        return self.get_var(namespace, key)

    def set_meta(self, namespace, key, value):
        self.set_var(namespace, key, value=value)

    def is_constructed(self, namespace):
        return self.get_meta(namespace, config.MINTER_KEY) is not None

    def flush(self):
        self.driver.flush()
        self.clear_pending_state()
