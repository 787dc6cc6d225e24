"""Exception hierarchy for Remotely Save PRO authentication"""

from typing import List


class ProAuthError(Exception):
    """Base class for all PRO account errors"""


class AuthResponseError(ProAuthError):
    """The token endpoint rejected the grant; nothing was persisted"""

    def __init__(self, error: str):
        self.error = error
        super().__init__(f"you should not save the setting for {error}")


class TokenRefreshError(ProAuthError):
    """The refresh grant was rejected by the provider"""


class AccountNotConnectedError(ProAuthError):
    """No PRO account has been connected yet"""


class EntitlementError(ProAuthError):
    """One or more requested PRO features are not subscribed

    Attributes:
        messages: Every violation found, in check order
    """

    def __init__(self, messages: List[str]):
        self.messages = list(messages)
        super().__init__("\n\n".join(self.messages))
