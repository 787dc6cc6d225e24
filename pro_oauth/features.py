"""Fetching PRO entitlements and profile data"""

import logging
from typing import Any, Dict, Optional

import httpx

from settings import PLUGIN_VERSION_HEADER, PRO_WEBSITE
from .models import FeatureInfo, ProConfig
from .token_manager import get_access_token
from .utils import SaveCallback, call_save

logger = logging.getLogger(__name__)

PRO_LIST_ENDPOINT = f"{PRO_WEBSITE}/api/v1/pro/list"
PROFILE_LIST_ENDPOINT = f"{PRO_WEBSITE}/api/v1/profile/list"


async def _get_with_token(
    url: str,
    config: ProConfig,
    plugin_version: str,
    save: Optional[SaveCallback]
) -> Dict[str, Any]:
    access = await get_access_token(config, save)

    async with httpx.AsyncClient(timeout=None) as client:
        response = await client.get(
            url,
            headers={
                "Authorization": f"Bearer {access}",
                PLUGIN_VERSION_HEADER: plugin_version,
            },
        )

    response.raise_for_status()
    return response.json()


async def get_and_save_pro_features(
    config: ProConfig,
    plugin_version: str,
    save: Optional[SaveCallback] = None
) -> Dict[str, Any]:
    """Download the entitled features and store them in config

    Args:
        config: PRO config, updated in place
        plugin_version: Host plugin version sent as a header
        save: Optional host persistence hook

    Returns:
        Raw response payload ({"proFeatures": [...]})
    """
    payload = await _get_with_token(PRO_LIST_ENDPOINT, config, plugin_version, save)

    config.enabled_pro_features = [
        FeatureInfo.from_dict(f) for f in payload["proFeatures"]
    ]
    logger.info(f"Fetched {len(config.enabled_pro_features)} PRO feature(s)")
    await call_save(save)
    return payload


async def get_and_save_pro_email(
    config: ProConfig,
    plugin_version: str,
    save: Optional[SaveCallback] = None
) -> Dict[str, Any]:
    """Download the account email and store it in config

    Returns:
        Raw response payload ({"email": ...})
    """
    payload = await _get_with_token(PROFILE_LIST_ENDPOINT, config, plugin_version, save)

    config.email = payload["email"]
    await call_save(save)
    return payload
