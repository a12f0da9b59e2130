import os
import h5py
from nftregistry.db.encoder import encode, decode

ATTRIBUTE = 'value'


def set_value(filename, group, value):
    with h5py.File(filename, 'a') as f:
        if group not in f:
            f.create_group(group)
        ev = encode(value)
        f[group].attrs.create(ATTRIBUTE, ev, dtype='S' + str(len(ev.encode())))


def get_value(filename, group):
    if not os.path.isfile(filename):
        return None

    with h5py.File(filename, 'r') as f:
        try:
            return decode(f[group].attrs[ATTRIBUTE])
        except KeyError:
            return None


def del_value(filename, group):
    if not os.path.isfile(filename):
        return

    with h5py.File(filename, 'a') as f:
        try:
            del f[group].attrs[ATTRIBUTE]
        except KeyError:
            pass


def get_groups(filename):
    groups = []

    def _store_group_if_has_value(name, obj):
        if ATTRIBUTE in obj.attrs:
            groups.append(name)

    if not os.path.isfile(filename):
        return groups

    with h5py.File(filename, 'r') as f:
        f.visititems(_store_group_if_has_value)

    return groups
