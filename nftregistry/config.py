import os

DELIMITER = ':'
INDEX_SEPARATOR = '.'
HDF5_GROUP_SEPARATOR = '/'

MAX_HASH_DIMENSIONS = 16
MAX_KEY_SIZE = 1024
# two identities share one operator key
MAX_IDENTITY_SIZE = (MAX_KEY_SIZE - 1) // 2
FILENAME_LEN_MAX = 255

NAME_KEY = '__name__'
SYMBOL_KEY = '__symbol__'
BASE_URI_KEY = '__base_uri__'
AUTHORITY_KEY = '__authority__'
MINTER_KEY = '__minter__'
EVENTS_KEY = '__events__'
EVENT_COUNT_KEY = '__event_count__'

PRIVATE_METHOD_PREFIX = '_'
EXPORT_ATTRIBUTE = '__export__'

NULL_IDENTITY = '0x0000000000000000000000000000000000000000'
MAX_TOKEN_ID = 2 ** 256 - 1

DEFAULT_NAMESPACE = 'registry'
DEFAULT_SIGNER = 'sys'

# Provisioning
AUXILIARY_AUTHORITY_ENV = 'NFT_AUXILIARY_AUTHORITY'
METADATA_URI_ENV = 'NFT_METADATA_URI'

STORAGE_HOME = os.getenv('NFT_STORAGE_HOME')
