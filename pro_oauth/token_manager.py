"""Access token resolution with transparent refresh"""

import logging
from typing import Optional

from .credentials import set_config_by_successful_auth_inplace
from .exceptions import TokenRefreshError
from .models import AuthFailure, ProConfig
from .token_exchange import send_refresh_token_req
from .utils import SaveCallback, now_ms

logger = logging.getLogger(__name__)


def is_access_token_valid(config: ProConfig, ts: Optional[int] = None) -> bool:
    """Check whether the cached access token can be used as is

    Args:
        config: PRO config
        ts: Reference time in epoch ms (default: now)

    Returns:
        True if the token is set, not expired and the credentials are not past
        their forced deletion time
    """
    if ts is None:
        ts = now_ms()
    deleted_at = config.credentials_should_be_deleted_at_time_ms
    if deleted_at is None:
        deleted_at = ts + 1000 * 1000
    return (
        bool(config.access_token)
        and config.access_token_expires_at_time_ms > ts
        and deleted_at > ts
    )


async def get_access_token(config: ProConfig, save: Optional[SaveCallback] = None) -> str:
    """Get a valid access token, refreshing it when needed

    Every request to the PRO API must obtain its token here rather than
    reading config.access_token directly.

    Args:
        config: PRO config, updated in place on refresh
        save: Optional host persistence hook

    Returns:
        Valid access token

    Raises:
        TokenRefreshError: If the provider rejects the refresh token
        httpx.HTTPError: If the refresh request fails
    """
    ts = now_ms()
    if is_access_token_valid(config, ts):
        return config.access_token

    logger.debug(
        f"Access token needs refresh: has_token={bool(config.access_token)}, "
        f"accessTokenExpiresAtTimeMs={config.access_token_expires_at_time_ms}, "
        f"credentialsShouldBeDeletedAtTimeMs={config.credentials_should_be_deleted_at_time_ms}"
    )

    res = await send_refresh_token_req(config.refresh_token or "refresh-")
    if isinstance(res, AuthFailure):
        logger.error(f"Refresh token rejected by provider: {res.error}")
        raise TokenRefreshError("cannot update accessToken")

    await set_config_by_successful_auth_inplace(config, res, save)
    return res.access_token
