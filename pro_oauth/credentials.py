"""Applying token responses to the PRO config record"""

import logging
from typing import Optional

from settings import ACCESS_TOKEN_SAFETY_MARGIN_MS, OAUTH2_FORCE_EXPIRE_MILLISECONDS
from .exceptions import AuthResponseError
from .models import AuthFailure, AuthResponse, ProConfig
from .utils import SaveCallback, call_save, now_ms

logger = logging.getLogger(__name__)


async def set_config_by_successful_auth_inplace(
    config: ProConfig,
    auth_res: AuthResponse,
    save: Optional[SaveCallback] = None
) -> None:
    """Store a successful token response in config and persist it

    Args:
        config: PRO config to update in place
        auth_res: Response of an authorization-code or refresh grant
        save: Optional host persistence hook

    Raises:
        AuthResponseError: If auth_res is an error response (config untouched)
    """
    if isinstance(auth_res, AuthFailure):
        raise AuthResponseError(auth_res.error)

    ts = now_ms()
    config.access_token = auth_res.access_token
    config.access_token_expires_at_time_ms = (
        ts + round(auth_res.expires_in * 1000) - ACCESS_TOKEN_SAFETY_MARGIN_MS
    )
    config.access_token_expires_in_ms = round(auth_res.expires_in * 1000)
    config.refresh_token = auth_res.refresh_token or config.refresh_token

    # Force re-authorization 80 days after the last successful auth
    config.credentials_should_be_deleted_at_time_ms = ts + OAUTH2_FORCE_EXPIRE_MILLISECONDS

    await call_save(save)

    logger.info("finish updating local info of Remotely Save official website token")
