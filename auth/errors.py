"""
auth/errors.py -- Exception taxonomy for token issuance and delegated login.

Credential and provider errors are recovered at the HTTP boundary and shown
to the user as a generic denial. None of them carries the reason a check
failed -- the message is safe to log but is never echoed to the caller.

ConfigurationMissing lives in core/config.py because core/ cannot import
from auth/.
"""


class AuthError(Exception):
    """Base class for recoverable authentication failures."""


class InvalidCredential(AuthError):
    """The submitted credential is not in the accepted set."""


class ProviderDenied(AuthError):
    """The identity provider refused the login or the round trip errored."""


class CorrelationFailure(AuthError):
    """The callback could not be matched to the challenge that started it.

    Raised for a state mismatch on the callback and for a challenge whose
    return destination is the provider callback itself.
    """
