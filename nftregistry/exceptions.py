class RegistryError(Exception):
    """
    The base exception for the token registry. The fmt directive
    will be overloaded by the inheriting classes

    :ivar msg: The message associated with the error
    """
    fmt = 'An unspecified error occurred'

    def __init__(self, **kwargs):
        msg = self.fmt.format(**kwargs)
        Exception.__init__(self, msg)
        self.kwargs = kwargs


class InvalidAddress(RegistryError):
    """
    A null or malformed identity was given where a real one is required

    :ivar identity: The offending identity
    """
    fmt = "Invalid address '{identity}'"


class NonExistentToken(RegistryError):
    """
    The token id has no owner, or its owner is not the one claimed

    :ivar token_id: The id that was looked up
    """
    fmt = "Token '{token_id}' does not exist"


class TokenAlreadyExists(RegistryError):
    fmt = "Token '{token_id}' has already been minted"


class InvalidRecipient(RegistryError):
    fmt = "Cannot send token to '{to}'"


class Unauthorized(RegistryError):
    """
    The caller does not have the standing required for the action

    :ivar caller: The identity that attempted the action
    :ivar action: What was attempted
    """
    fmt = "Caller '{caller}' is not allowed to {action}"


class InvalidTokenId(RegistryError):
    fmt = "Token id '{token_id}' is not a positive integer in range"


class TransferRejected(RegistryError):
    fmt = "Recipient '{to}' rejected token '{token_id}'"


class ImmutableAttribute(RegistryError):
    fmt = "Attribute '{attribute}' is write-once and already set"


class ProvisioningError(RegistryError):
    """
    Provisioning aborted before the registry was constructed

    :ivar missing: Names of the settings that were not supplied
    """
    fmt = "Cannot provision registry, missing: {missing}"


class PrivateMethod(RegistryError):
    fmt = "Method '{function_name}' is private"


class UnknownMethod(RegistryError):
    fmt = "Method '{function_name}' is not exported"
