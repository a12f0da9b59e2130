from unittest import TestCase
from nftregistry.client import RegistryClient
from nftregistry.receiver import TokenReceiver, AcceptingReceiver, RejectingReceiver
from nftregistry.execution.runtime import rt
from nftregistry.exceptions import TransferRejected, Unauthorized, InvalidRecipient

OWNER = 'owner'
BOB = 'bob'
SARA = 'sara'
VAULT = 'vault'

ID1 = 123


class RecordingReceiver(TokenReceiver):
    def __init__(self, accept=True):
        self.accept = accept
        self.calls = []
        self.callers = []

    def can_receive(self, operator, sender, token_id, data):
        self.calls.append((operator, sender, token_id, data))
        self.callers.append(rt.context.caller)
        return self.accept


class CheckingReceiver(TokenReceiver):
    def __init__(self, handle, accept=False):
        self.handle = handle
        self.accept = accept
        self.seen = []

    def can_receive(self, operator, sender, token_id, data):
        self.seen.append(self.handle.owner_of(token_id))
        return self.accept


class ExplodingReceiver(TokenReceiver):
    def can_receive(self, operator, sender, token_id, data):
        raise ValueError('cannot hold tokens')


class TestSafeTransfer(TestCase):
    def setUp(self):
        self.client = RegistryClient()
        self.owner = self.client.deploy('missph', 'MissUniversePh', 'MISSUPH', 'https://meta/', 'rfox',
                                        deployer=OWNER)
        self.bob = self.owner.connect(BOB)
        self.sara = self.owner.connect(SARA)

        self.owner.direct_mint(BOB, ID1)

    def tearDown(self):
        self.client.flush()

    def test_safe_transfer_to_plain_identity(self):
        self.bob.safe_transfer_from(BOB, SARA, ID1)

        self.assertEqual(self.owner.balance_of(BOB), 0)
        self.assertEqual(self.owner.balance_of(SARA), 1)
        self.assertEqual(self.owner.owner_of(ID1), SARA)
        self.assertEqual(self.owner.registry.event_log.last().name, 'Transfer')

    def test_safe_transfer_to_accepting_receiver(self):
        self.owner.register_receiver(VAULT, AcceptingReceiver())

        self.bob.safe_transfer_from(BOB, VAULT, ID1)

        self.assertEqual(self.owner.owner_of(ID1), VAULT)

    def test_receiver_sees_operator_sender_and_data(self):
        receiver = RecordingReceiver()
        self.owner.register_receiver(VAULT, receiver)
        self.bob.set_approval_for_all(SARA, True)

        self.sara.safe_transfer_from(BOB, VAULT, ID1, data=b'\x01')

        self.assertEqual(receiver.calls, [(SARA, BOB, ID1, b'\x01')])

    def test_receiver_is_called_by_the_registry(self):
        receiver = RecordingReceiver()
        self.owner.register_receiver(VAULT, receiver)

        self.bob.safe_transfer_from(BOB, VAULT, ID1)

        self.assertEqual(receiver.callers, ['missph'])

    def test_rejection_rolls_back_transfer(self):
        self.owner.register_receiver(VAULT, RejectingReceiver())
        self.bob.approve(SARA, ID1)
        events = len(self.owner.events())

        with self.assertRaises(TransferRejected):
            self.bob.safe_transfer_from(BOB, VAULT, ID1)

        self.assertEqual(self.owner.owner_of(ID1), BOB)
        self.assertEqual(self.owner.balance_of(BOB), 1)
        self.assertEqual(self.owner.balance_of(VAULT), 0)
        self.assertEqual(self.owner.get_approved(ID1), SARA)
        self.assertEqual(len(self.owner.events()), events)

    def test_receiver_error_is_a_rejection(self):
        self.owner.register_receiver(VAULT, ExplodingReceiver())

        with self.assertRaises(TransferRejected) as e:
            self.bob.safe_transfer_from(BOB, VAULT, ID1)

        self.assertIsInstance(e.exception.__cause__, ValueError)
        self.assertEqual(self.owner.owner_of(ID1), BOB)

    def test_unregistered_receiver_accepts(self):
        self.owner.register_receiver(VAULT, RejectingReceiver())
        self.owner.registry.unregister_receiver(VAULT)

        self.bob.safe_transfer_from(BOB, VAULT, ID1)

        self.assertEqual(self.owner.owner_of(ID1), VAULT)

    def test_receiver_not_consulted_when_transfer_fails(self):
        receiver = RecordingReceiver()
        self.owner.register_receiver(VAULT, receiver)

        with self.assertRaises(Unauthorized):
            self.sara.safe_transfer_from(BOB, VAULT, ID1)

        self.assertEqual(receiver.calls, [])

    def test_safe_transfer_to_null_fails(self):
        with self.assertRaises(InvalidRecipient):
            self.bob.safe_transfer_from(BOB, None, ID1)

    def test_context_restored_after_receiver(self):
        self.owner.register_receiver(VAULT, RecordingReceiver())

        self.bob.safe_transfer_from(BOB, VAULT, ID1)

        self.assertEqual(rt.context._state, [])

    def test_receiver_reading_registry_then_rejecting_rolls_back(self):
        receiver = CheckingReceiver(self.owner.connect(VAULT))
        self.owner.register_receiver(VAULT, receiver)

        with self.assertRaises(TransferRejected):
            self.bob.safe_transfer_from(BOB, VAULT, ID1)

        self.assertEqual(receiver.seen, [VAULT])
        self.assertEqual(self.owner.owner_of(ID1), BOB)
        self.assertEqual(self.owner.balance_of(BOB), 1)
        self.assertEqual(self.owner.balance_of(VAULT), 0)
        self.assertEqual(self.owner.events()[-1]['to'], BOB)

    def test_receiver_reading_registry_then_accepting(self):
        receiver = CheckingReceiver(self.owner.connect(VAULT), accept=True)
        self.owner.register_receiver(VAULT, receiver)

        self.bob.safe_transfer_from(BOB, VAULT, ID1)

        self.assertEqual(self.owner.owner_of(ID1), VAULT)
        self.assertEqual(rt.context._state, [])
        self.assertIsNone(rt.context.this)
