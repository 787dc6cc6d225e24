"""Remotely Save PRO account authentication package"""

from typing import Any, Callable, Dict, Iterable, Optional

from .models import (
    PRO_FEATURE_TYPE,
    AuthFailure,
    AuthorizationRequest,
    AuthResponse,
    AuthSuccess,
    FeatureInfo,
    PkceCodes,
    PluginSettings,
    ProConfig,
    default_pro_config,
    parse_auth_response,
)
from .exceptions import (
    AccountNotConnectedError,
    AuthResponseError,
    EntitlementError,
    ProAuthError,
    TokenRefreshError,
)
from .pkce import PKCEManager, code_verifier_to_code_challenge, generate_pkce
from .authorization import AuthorizationURLBuilder, generate_auth_url_and_code_verifier_challenge
from .token_exchange import send_auth_req, send_refresh_token_req
from .credentials import set_config_by_successful_auth_inplace
from .token_manager import get_access_token, is_access_token_valid
from .features import get_and_save_pro_email, get_and_save_pro_features
from .entitlement import check_pro_runnable_and_fix_inplace
from .utils import SaveCallback


class ProAccountManager:
    """PRO account flow for one host settings record

    This class orchestrates:
    - Authorization URL and PKCE generation
    - Authorization code exchange
    - Access token retrieval with refresh
    - Feature and profile fetching
    - Entitlement checks
    """

    def __init__(
        self,
        settings: PluginSettings,
        plugin_version: str,
        save: Optional[SaveCallback] = None
    ):
        self.settings = settings
        self.plugin_version = plugin_version
        self.save = save

    @property
    def pro(self) -> ProConfig:
        """The PRO record, created from the defaults on first use"""
        if self.settings.pro is None:
            self.settings.pro = default_pro_config()
        return self.settings.pro

    def generate_auth_url(self, has_callback: bool = False) -> AuthorizationRequest:
        """Build the authorize URL; keep the returned verifier for exchange_code"""
        return generate_auth_url_and_code_verifier_challenge(has_callback)

    async def exchange_code(
        self,
        verifier: str,
        auth_code: str,
        error_callback: Optional[Callable[[Exception], Any]] = None
    ) -> bool:
        """Exchange an authorization code and store the tokens

        Returns:
            False if the request itself failed (reported via error_callback)

        Raises:
            AuthResponseError: If the provider rejected the code
        """
        auth_res = await send_auth_req(verifier, auth_code, error_callback)
        if auth_res is None:
            return False
        await set_config_by_successful_auth_inplace(self.pro, auth_res, self.save)
        return True

    async def get_access_token(self) -> str:
        return await get_access_token(self.pro, self.save)

    async def refresh_features(self) -> Dict[str, Any]:
        return await get_and_save_pro_features(self.pro, self.plugin_version, self.save)

    async def refresh_email(self) -> Dict[str, Any]:
        return await get_and_save_pro_email(self.pro, self.plugin_version, self.save)

    async def check_runnable(self, features_to_check: Iterable[str]) -> bool:
        """Raise unless every requested feature may run"""
        return await check_pro_runnable_and_fix_inplace(
            features_to_check, self.settings, self.plugin_version, self.save
        )


__all__ = [
    "PRO_FEATURE_TYPE",
    "AuthFailure",
    "AuthorizationRequest",
    "AuthResponse",
    "AuthSuccess",
    "FeatureInfo",
    "PkceCodes",
    "PluginSettings",
    "ProConfig",
    "default_pro_config",
    "parse_auth_response",
    "AccountNotConnectedError",
    "AuthResponseError",
    "EntitlementError",
    "ProAuthError",
    "TokenRefreshError",
    "PKCEManager",
    "code_verifier_to_code_challenge",
    "generate_pkce",
    "AuthorizationURLBuilder",
    "generate_auth_url_and_code_verifier_challenge",
    "send_auth_req",
    "send_refresh_token_req",
    "set_config_by_successful_auth_inplace",
    "get_access_token",
    "is_access_token_valid",
    "get_and_save_pro_email",
    "get_and_save_pro_features",
    "check_pro_runnable_and_fix_inplace",
    "ProAccountManager",
]
