from enum import Enum

from nftregistry.db.driver import LedgerDriver
from nftregistry.db.orm import Hash, Variable
from nftregistry.events import EventLog, TRANSFER, APPROVAL, APPROVAL_FOR_ALL
from nftregistry.execution.runtime import rt
from nftregistry.exceptions import InvalidAddress, NonExistentToken, TokenAlreadyExists, InvalidRecipient, \
    Unauthorized, InvalidTokenId, TransferRejected, ImmutableAttribute
from nftregistry.logger import get_logger
from nftregistry import config

log = get_logger('Registry')

MINTER_CHANGED = 'MinterChanged'


def export(f):
    setattr(f, config.EXPORT_ATTRIBUTE, True)
    return f


def is_exported(f):
    return getattr(f, config.EXPORT_ATTRIBUTE, False) is True


def is_null(identity):
    return identity is None or identity == '' or identity == config.NULL_IDENTITY


def is_well_formed(identity):
    return isinstance(identity, str) and \
           len(identity) <= config.MAX_IDENTITY_SIZE and \
           config.DELIMITER not in identity and \
           config.INDEX_SEPARATOR not in identity


def is_valid_token_id(token_id):
    return isinstance(token_id, int) and not isinstance(token_id, bool) and 0 < token_id <= config.MAX_TOKEN_ID


class Standing(Enum):
    NONE = 0
    OWNER = 1
    OPERATOR = 2
    APPROVED = 3


CAN_APPROVE = {Standing.OWNER, Standing.OPERATOR}
CAN_TRANSFER = {Standing.OWNER, Standing.OPERATOR, Standing.APPROVED}


class TokenRegistry:
    """
    Ledger of non-fungible tokens. Every token id has at most one owner, a
    token exists iff it has one, and balances move with ownership in the same
    write set.

    Mutating methods act on behalf of ``rt.context.caller`` and are meant to
    run through an :class:`~nftregistry.execution.executor.Executor`, which
    commits their writes and events together or discards both.
    """
    def __init__(self, namespace=config.DEFAULT_NAMESPACE, driver: LedgerDriver=None):
        assert is_well_formed(namespace) and namespace != '', 'Illegal namespace {}.'.format(namespace)

        self.namespace = namespace
        self.driver = driver if driver is not None else LedgerDriver()

        self.owners = Hash(namespace, 'owners', driver=self.driver)
        self.balances = Hash(namespace, 'balances', driver=self.driver, default_value=0)
        self.approvals = Hash(namespace, 'approvals', driver=self.driver)
        self.operators = Hash(namespace, 'operators', driver=self.driver, default_value=False)

        self._name = Variable(namespace, config.NAME_KEY, driver=self.driver)
        self._symbol = Variable(namespace, config.SYMBOL_KEY, driver=self.driver)
        self._base_uri = Variable(namespace, config.BASE_URI_KEY, driver=self.driver)
        self._authority = Variable(namespace, config.AUTHORITY_KEY, driver=self.driver)
        self._minter = Variable(namespace, config.MINTER_KEY, driver=self.driver)

        self.event_log = EventLog(namespace, self.driver)

        # identity -> TokenReceiver, consulted by safe_transfer_from only
        self.receivers = {}

    @property
    def ctx(self):
        return rt.context

    @export
    def construct(self, name: str, symbol: str, base_uri: str, auxiliary_authority: str, minter: str=None):
        if self._minter.get() is not None:
            raise ImmutableAttribute(attribute='minter')

        minter = minter if minter is not None else self.ctx.caller
        if is_null(minter) or not is_well_formed(minter):
            raise InvalidAddress(identity=minter)

        self._name.set(name)
        self._symbol.set(symbol)
        self._base_uri.set(base_uri)
        self._authority.set(auxiliary_authority)
        self._minter.set(minter)

        log.debug('Constructed {} ({}) in namespace {}, minter {}'.format(name, symbol, self.namespace, minter))

    # Registry identity

    @export
    def name(self):
        return self._name.get()

    @export
    def symbol(self):
        return self._symbol.get()

    @export
    def base_uri(self):
        return self._base_uri.get()

    @export
    def auxiliary_authority(self):
        return self._authority.get()

    @export
    def minter(self):
        return self._minter.get()

    # Queries

    def _owner(self, token_id):
        if not is_valid_token_id(token_id):
            return None
        return self.owners[token_id]

    def _require_owner(self, token_id):
        owner = self._owner(token_id)
        if owner is None:
            raise NonExistentToken(token_id=token_id)
        return owner

    @export
    def balance_of(self, identity):
        if is_null(identity) or not is_well_formed(identity):
            raise InvalidAddress(identity=identity)
        return self.balances[identity]

    @export
    def owner_of(self, token_id):
        return self._require_owner(token_id)

    @export
    def get_approved(self, token_id):
        self._require_owner(token_id)
        return self.approvals[token_id]

    @export
    def is_approved_for_all(self, owner, operator):
        if not is_well_formed(owner) or not is_well_formed(operator):
            return False
        return self.operators[owner, operator] is True

    @export
    def token_uri(self, token_id):
        self._require_owner(token_id)
        return '{}{}'.format(self._base_uri.get(), token_id)

    @export
    def total_supply(self):
        return len(self.owners.all())

    @export
    def events(self):
        return self.event_log.all()

    def standing(self, caller, token_id, owner=None) -> Standing:
        """
        Single capability check shared by approve and transfer_from. The
        strongest standing wins when several apply.
        """
        if is_null(caller) or not is_well_formed(caller):
            return Standing.NONE

        owner = owner if owner is not None else self._owner(token_id)
        if owner is None:
            return Standing.NONE

        if caller == owner:
            return Standing.OWNER

        if self.operators[owner, caller] is True:
            return Standing.OPERATOR

        if self.approvals[token_id] == caller:
            return Standing.APPROVED

        return Standing.NONE

    # Mutations

    @export
    def direct_mint(self, to, token_id):
        if self.ctx.caller != self._minter.get():
            raise Unauthorized(caller=self.ctx.caller, action='mint')

        if is_null(to):
            raise InvalidRecipient(to=to)

        if not is_well_formed(to):
            raise InvalidAddress(identity=to)

        if not is_valid_token_id(token_id):
            raise InvalidTokenId(token_id=token_id)

        if self.owners[token_id] is not None:
            raise TokenAlreadyExists(token_id=token_id)

        self.owners[token_id] = to
        self.balances[to] += 1

        self.event_log.emit(TRANSFER, **{'from': config.NULL_IDENTITY, 'to': to, 'token_id': token_id})
        log.debug('Minted {} to {}'.format(token_id, to))

    @export
    def approve(self, to, token_id):
        owner = self._require_owner(token_id)

        if self.standing(self.ctx.caller, token_id, owner=owner) not in CAN_APPROVE:
            raise Unauthorized(caller=self.ctx.caller, action='approve token {}'.format(token_id))

        if is_null(to):
            del self.approvals[token_id]
            to = config.NULL_IDENTITY
        elif not is_well_formed(to):
            raise InvalidAddress(identity=to)
        else:
            self.approvals[token_id] = to

        self.event_log.emit(APPROVAL, owner=owner, approved=to, token_id=token_id)
        log.debug('{} approved {} for {}'.format(self.ctx.caller, to, token_id))

    @export
    def set_approval_for_all(self, operator, approved: bool):
        if is_null(operator) or not is_well_formed(operator):
            raise InvalidAddress(identity=operator)

        caller = self.ctx.caller
        if not is_well_formed(caller):
            raise InvalidAddress(identity=caller)

        approved = bool(approved)

        if approved:
            self.operators[caller, operator] = True
        else:
            del self.operators[caller, operator]

        self.event_log.emit(APPROVAL_FOR_ALL, owner=caller, operator=operator, approved=approved)
        log.debug('{} set operator {} to {}'.format(caller, operator, approved))

    @export
    def transfer_from(self, sender, to, token_id):
        owner = self._owner(token_id)
        if owner is None or owner != sender:
            raise NonExistentToken(token_id=token_id)

        if is_null(to):
            raise InvalidRecipient(to=to)

        if not is_well_formed(to):
            raise InvalidAddress(identity=to)

        if self.standing(self.ctx.caller, token_id, owner=owner) not in CAN_TRANSFER:
            raise Unauthorized(caller=self.ctx.caller, action='transfer token {}'.format(token_id))

        del self.approvals[token_id]

        self.owners[token_id] = to
        self.balances[sender] -= 1
        self.balances[to] += 1

        self.event_log.emit(TRANSFER, **{'from': sender, 'to': to, 'token_id': token_id})
        log.debug('Transferred {} from {} to {}'.format(token_id, sender, to))

    @export
    def safe_transfer_from(self, sender, to, token_id, data: bytes=b''):
        self.transfer_from(sender, to, token_id)

        receiver = self.receivers.get(to)
        if receiver is None:
            return

        operator = self.ctx.caller
        self.ctx._add_state({
            'this': to,
            'caller': self.namespace,
            'signer': self.ctx.signer
        })

        try:
            accepted = receiver.can_receive(operator, sender, token_id, data)
        except Exception as e:
            raise TransferRejected(to=to, token_id=token_id) from e
        finally:
            self.ctx._pop_state()

        if not accepted:
            raise TransferRejected(to=to, token_id=token_id)

    @export
    def set_minter(self, new_minter):
        previous = self._minter.get()
        if self.ctx.caller != previous:
            raise Unauthorized(caller=self.ctx.caller, action='change the minting authority')

        if is_null(new_minter) or not is_well_formed(new_minter):
            raise InvalidAddress(identity=new_minter)

        self._minter.set(new_minter)
        self.event_log.emit(MINTER_CHANGED, previous=previous, minter=new_minter)

    # Collaborator wiring, not ledger state

    def register_receiver(self, identity, receiver):
        self.receivers[identity] = receiver

    def unregister_receiver(self, identity):
        self.receivers.pop(identity, None)
