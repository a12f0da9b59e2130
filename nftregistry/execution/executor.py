from threading import RLock
from copy import deepcopy
import traceback

from nftregistry.execution.runtime import rt
from nftregistry.db.driver import LedgerDriver
from nftregistry.exceptions import PrivateMethod, UnknownMethod
from nftregistry.registry import is_exported
from nftregistry.logger import get_logger
from nftregistry import config

log = get_logger('Executor')

# rt is shared by the whole process, so every executor serialises on one lock
_lock = RLock()


class Executor:
    """
    Runs exported registry methods as transactions. Only the outermost call
    commits or rolls back. A call made while another is running on the same
    thread (a receiver reading the registry during a safe transfer) joins the
    running transaction and pushes its caller on top of the current context.
    """
    def __init__(self, driver=None, auto_commit=True):
        self.driver = driver if driver is not None else LedgerDriver()
        self.auto_commit = auto_commit
        self.lock = _lock
        self.depth = 0

    def _resolve(self, registry, function_name):
        if function_name.startswith(config.PRIVATE_METHOD_PREFIX):
            raise PrivateMethod(function_name=function_name)

        func = getattr(registry, function_name, None)
        if func is None or not is_exported(func):
            raise UnknownMethod(function_name=function_name)

        return func

    def execute(self, sender, registry, function_name, kwargs=None, auto_commit=None) -> dict:
        if kwargs is None:
            kwargs = {}

        if auto_commit is None:
            auto_commit = self.auto_commit

        with self.lock:
            outermost = self.depth == 0
            in_call = rt.in_call()
            states = len(rt.context._state)

            events_before = len(registry.event_log)
            writes = {}

            self.depth += 1
            try:
                assert registry.driver is self.driver, 'Registry {} is bound to another driver.'.format(registry.namespace)

                func = self._resolve(registry, function_name)

                if in_call:
                    rt.context._add_state({
                        'this': registry.namespace,
                        'caller': sender,
                        'signer': rt.context.signer
                    })
                else:
                    rt.set_up(signer=sender, namespace=registry.namespace)

                result = func(**kwargs)
                status_code = 0

                writes = deepcopy(self.driver.pending_writes)
                events = registry.event_log.since(events_before)

                if auto_commit and outermost:
                    self.driver.commit()
                    log.debug('{} {}.{} committed {} writes'.format(
                        sender, registry.namespace, function_name, len(writes)))
            except Exception as e:
                result = e
                status_code = 1
                events = []

                log.error('{} {}.{} failed: {}'.format(sender, registry.namespace, function_name, e))
                log.debug(traceback.format_exc())

                if outermost:
                    self.driver.clear_pending_state()
            finally:
                self.depth -= 1

                if not in_call:
                    rt.clean_up()
                elif len(rt.context._state) > states:
                    rt.context._pop_state()

        return {
            'status_code': status_code,
            'result': result,
            'writes': writes,
            'events': events,
        }
