"""OAuth authorization URL construction for the PRO website"""

import webbrowser
from typing import Optional
from urllib.parse import urlencode

from settings import COMMAND_CALLBACK_PRO, PRO_CLIENT_ID, PRO_SCOPE, PRO_WEBSITE
from .models import AuthorizationRequest
from .pkce import PKCEManager, generate_pkce


def get_client_id() -> str:
    """The fixed client id, with a literal fallback if it was left unset"""
    return PRO_CLIENT_ID or "cli-"


def generate_auth_url_and_code_verifier_challenge(has_callback: bool) -> AuthorizationRequest:
    """Build the authorize URL along with a fresh PKCE pair

    Args:
        has_callback: Append a redirect_uri pointing back into the host app

    Returns:
        AuthorizationRequest; keep its code_verifier for the code exchange
    """
    codes = generate_pkce()

    params = {
        "response_type": "code",
        "client_id": get_client_id(),
        "token_access_type": "offline",
        "code_challenge_method": "S256",
        "code_challenge": codes.code_challenge,
        "scope": PRO_SCOPE,
    }
    if has_callback:
        params["redirect_uri"] = f"obsidian://{COMMAND_CALLBACK_PRO}"

    return AuthorizationRequest(
        auth_url=f"{PRO_WEBSITE}/oauth2/authorize?{urlencode(params)}",
        code_verifier=codes.code_verifier,
        code_challenge=codes.code_challenge,
    )


class AuthorizationURLBuilder:
    """Builds authorization URLs and parks the verifier for the later exchange"""

    def __init__(self, pkce_manager: Optional[PKCEManager] = None):
        self.pkce = pkce_manager or PKCEManager()

    def get_authorize_url(self, has_callback: bool = False) -> str:
        """Construct the authorize URL and save its verifier

        Returns:
            Full authorization URL
        """
        request = generate_auth_url_and_code_verifier_challenge(has_callback)
        self.pkce.code_verifier = request.code_verifier
        self.pkce.save_pkce()
        return request.auth_url

    def start_login_flow(self, has_callback: bool = False) -> str:
        """Start the OAuth login flow by opening browser

        Returns:
            Authorization URL that was opened
        """
        auth_url = self.get_authorize_url(has_callback)
        webbrowser.open(auth_url)
        return auth_url
