from abc import ABC, abstractmethod


class TokenReceiver(ABC):
    """
    Capability of an identity to accept or refuse tokens sent with
    ``safe_transfer_from``. Identities without a registered receiver accept
    everything.
    """

    @abstractmethod
    def can_receive(self, operator, sender, token_id, data) -> bool:
        """
        :param operator: identity that initiated the transfer
        :param sender: previous owner of the token
        :param token_id: id of the token being received
        :param data: opaque bytes passed along by the caller
        :return: True to accept the token
        """


class AcceptingReceiver(TokenReceiver):
    def can_receive(self, operator, sender, token_id, data):
        return True


class RejectingReceiver(TokenReceiver):
    def can_receive(self, operator, sender, token_id, data):
        return False
