"""Entitlement checks run by the host before PRO functionality"""

import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from settings import FEATURE_MAX_AHEAD_MS
from .exceptions import AccountNotConnectedError, EntitlementError
from .features import get_and_save_pro_features
from .models import PluginSettings, ProConfig
from .utils import SaveCallback, now_ms

logger = logging.getLogger(__name__)

# feature name -> (does the current setting use it, label shown to the user)
GATED_FEATURES: Dict[str, Tuple[Callable[[PluginSettings], bool], str]] = {
    "feature-smart_conflict": (
        lambda s: s.conflict_action == "smart_conflict",
        "smart conflict",
    ),
    "feature-google_drive": (
        lambda s: s.service_type == "googledrive",
        "sync with Google Drive",
    ),
}


def needs_feature_refresh(pro: ProConfig, ts: Optional[int] = None) -> bool:
    """Whether any cached feature is expired or implausibly far in the future"""
    if ts is None:
        ts = now_ms()
    for f in pro.enabled_pro_features:
        too_far_in_the_future = f.expire_at_time_ms >= ts + FEATURE_MAX_AHEAD_MS
        already_expired = f.expire_at_time_ms <= ts
        if too_far_in_the_future or already_expired:
            return True
    return False


def count_entitlements(pro: ProConfig, feature_name: str) -> int:
    return sum(1 for f in pro.enabled_pro_features if f.feature_name == feature_name)


async def check_pro_runnable_and_fix_inplace(
    features_to_check: Iterable[str],
    settings: PluginSettings,
    plugin_version: str,
    save: Optional[SaveCallback] = None
) -> bool:
    """Verify that the requested PRO features may run

    Cached entitlements that look stale are re-fetched once first. Every
    requested feature is then checked and all violations are reported together.
    Feature names without a gate pass unchecked.

    Args:
        features_to_check: Feature names the caller is about to use
        settings: Host settings; settings.pro may be refreshed in place
        plugin_version: Host plugin version sent to the PRO API
        save: Optional host persistence hook

    Returns:
        True if everything is allowed

    Raises:
        AccountNotConnectedError: If no account is connected
        EntitlementError: If any requested feature is not subscribed
    """
    logger.debug("checkProRunnableAndFixInplace")

    pro = settings.pro
    if pro is None or pro.refresh_token is None:
        raise AccountNotConnectedError('you need to "connect" to your account to use PRO features')

    if needs_feature_refresh(pro):
        logger.info("the pro feature is too far in the future or has expired, check again.")
        await get_and_save_pro_features(pro, plugin_version, save)

    requested = set(features_to_check)
    error_msgs: List[str] = []

    for feature_name, (is_in_use, label) in GATED_FEATURES.items():
        if feature_name not in requested:
            continue
        logger.debug(
            f'checking "{feature_name}", conflictAction={settings.conflict_action}, '
            f"serviceType={settings.service_type}"
        )
        if not is_in_use(settings):
            continue
        if count_entitlements(pro, feature_name) != 1:
            error_msgs.append(
                f"You're trying to use \"{label}\" PRO feature but you haven't subscribe to it."
            )

    if error_msgs:
        raise EntitlementError(error_msgs)

    return True
