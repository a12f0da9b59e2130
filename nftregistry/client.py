from functools import partial
import inspect

from nftregistry.execution.executor import Executor
from nftregistry.db.driver import LedgerDriver
from nftregistry.registry import TokenRegistry, is_exported
from nftregistry.logger import get_logger
from nftregistry import config

log = get_logger('Client')


class RegistryHandle:
    """
    A registry bound to a signer. Every exported registry method is mirrored
    as a partial that runs through the executor; ``signer=`` overrides the
    bound signer for a single call.
    """
    def __init__(self, registry: TokenRegistry, signer, executor: Executor):
        self.registry = registry
        self.namespace = registry.namespace
        self.signer = signer
        self.executor = executor
        self.functions = []

        for func_name, _ in inspect.getmembers(registry, predicate=inspect.ismethod):
            if not is_exported(getattr(registry, func_name)):
                continue

            self.functions.append(func_name)
            setattr(self, func_name, partial(self._abstract_function_call, func=func_name))

    def _abstract_function_call(self, *args, func, signer=None, **kwargs):
        if args:
            params = list(inspect.signature(getattr(self.registry, func)).parameters)
            kwargs.update(dict(zip(params, args)))

        output = self.executor.execute(sender=signer or self.signer,
                                       registry=self.registry,
                                       function_name=func,
                                       kwargs=kwargs)

        if output['status_code'] == 1:
            raise output['result']

        return output['result']

    def connect(self, signer):
        return RegistryHandle(self.registry, signer=signer, executor=self.executor)

    def register_receiver(self, identity, receiver):
        self.registry.register_receiver(identity, receiver)

    def quick_read(self, variable, key=None):
        args = [] if key is None else [key]
        return self.executor.driver.get_var(self.namespace, variable, args)


class RegistryClient:
    def __init__(self, signer=config.DEFAULT_SIGNER, driver=None):
        self.raw_driver = driver if driver is not None else LedgerDriver()
        self.executor = Executor(driver=self.raw_driver)
        self.signer = signer
        self.registries = {}

    def flush(self):
        self.raw_driver.flush()
        self.registries = {}

    def deploy(self, namespace, name, symbol, base_uri, auxiliary_authority, deployer=None, minter=None):
        deployer = deployer or self.signer

        registry = TokenRegistry(namespace=namespace, driver=self.raw_driver)
        handle = RegistryHandle(registry, signer=deployer, executor=self.executor)

        handle.construct(name=name, symbol=symbol, base_uri=base_uri,
                         auxiliary_authority=auxiliary_authority, minter=minter)

        self.registries[namespace] = registry
        log.info('Deployed {} ({}) as {} by {}'.format(name, symbol, namespace, deployer))

        return handle

    def get_registry(self, namespace, signer=None):
        registry = self.registries.get(namespace)

        if registry is None:
            if not self.raw_driver.is_constructed(namespace):
                return None

            registry = TokenRegistry(namespace=namespace, driver=self.raw_driver)
            self.registries[namespace] = registry

        return RegistryHandle(registry, signer=signer or self.signer, executor=self.executor)

    def get_registries(self):
        registries = []
        for key in self.raw_driver.keys():
            if key.endswith(config.INDEX_SEPARATOR + config.MINTER_KEY):
                registries.append(key[:-len(config.INDEX_SEPARATOR + config.MINTER_KEY)])
        return registries
