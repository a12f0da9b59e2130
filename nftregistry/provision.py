import os

from nftregistry.client import RegistryClient
from nftregistry.exceptions import ProvisioningError
from nftregistry.registry import is_null
from nftregistry.logger import get_logger
from nftregistry import config

log = get_logger('Provision')

TOKEN_NAME = 'MissUniversePh'
TOKEN_SYMBOL = 'MISSUPH'


def provision(client: RegistryClient, deployer, name=TOKEN_NAME, symbol=TOKEN_SYMBOL,
              namespace=config.DEFAULT_NAMESPACE, base_uri=None, auxiliary_authority=None):
    """
    Deploy a registry once. The metadata base URI and the auxiliary authority
    fall back to NFT_METADATA_URI and NFT_AUXILIARY_AUTHORITY; when either is
    still missing nothing is constructed.
    """
    base_uri = base_uri or os.getenv(config.METADATA_URI_ENV)
    auxiliary_authority = auxiliary_authority or os.getenv(config.AUXILIARY_AUTHORITY_ENV)

    missing = []
    if not base_uri:
        missing.append(config.METADATA_URI_ENV)
    if is_null(auxiliary_authority):
        missing.append(config.AUXILIARY_AUTHORITY_ENV)

    if missing:
        log.error('Provisioning {} aborted, missing {}'.format(namespace, missing))
        raise ProvisioningError(missing=', '.join(missing))

    handle = client.deploy(namespace=namespace,
                           name=name,
                           symbol=symbol,
                           base_uri=base_uri,
                           auxiliary_authority=auxiliary_authority,
                           deployer=deployer)

    log.info('Provisioned {} with authority {} and base uri {}'.format(namespace, auxiliary_authority, base_uri))
    return handle
