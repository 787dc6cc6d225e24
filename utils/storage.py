import json
import logging
import os
import platform
from pathlib import Path
from typing import Any, Dict, Optional

from settings import PRO_SETTINGS_FILE
from pro_oauth.models import PluginSettings
from pro_oauth.token_manager import is_access_token_valid
from pro_oauth.utils import SaveCallback, now_ms

logger = logging.getLogger(__name__)


class SettingsStorage:
    """Host settings file holding the PRO account record, kept private (0600)"""

    def __init__(self, settings_file: Optional[str] = None):
        self.settings_path = Path(settings_file if settings_file else PRO_SETTINGS_FILE)
        self._ensure_secure_directory()

    def _ensure_secure_directory(self):
        """Create parent directory with secure permissions"""
        parent_dir = self.settings_path.parent
        if not parent_dir.exists():
            parent_dir.mkdir(parents=True, exist_ok=True)
            # Set directory permissions to 700 on Unix-like systems
            if platform.system() != "Windows":
                os.chmod(parent_dir, 0o700)

    def load_settings(self) -> PluginSettings:
        """Load settings, falling back to defaults if missing or unreadable"""
        if not self.settings_path.exists():
            return PluginSettings()

        try:
            data = json.loads(self.settings_path.read_text())
            return PluginSettings.from_dict(data)
        except (IOError, AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Could not read settings from {self.settings_path}: {e}")
            return PluginSettings()

    def save_settings(self, settings: PluginSettings):
        """Write settings to disk"""
        self.settings_path.write_text(json.dumps(settings.to_dict(), indent=2))

        # Set file permissions to 600 on Unix-like systems
        if platform.system() != "Windows":
            os.chmod(self.settings_path, 0o600)
        logger.debug(f"Saved settings to {self.settings_path}")

    def save_callback(self, settings: PluginSettings) -> SaveCallback:
        """Persistence hook that writes this settings object when called"""
        def save():
            self.save_settings(settings)
        return save

    def clear(self):
        """Remove stored settings"""
        if self.settings_path.exists():
            self.settings_path.unlink()

    def get_status(self, settings: PluginSettings) -> Dict[str, Any]:
        """Get account status without exposing secrets"""
        pro = settings.pro
        if pro is None or not pro.refresh_token:
            return {
                "connected": False,
                "email": None,
                "token_valid": False,
                "time_until_expiry": "No tokens",
                "reauth_in": None,
                "features": [],
            }

        current_ms = now_ms()
        remaining_s = (pro.access_token_expires_at_time_ms - current_ms) // 1000
        if remaining_s <= 0:
            time_str = "expired"
        elif remaining_s >= 3600:
            time_str = f"{remaining_s // 3600}h {(remaining_s % 3600) // 60}m"
        else:
            time_str = f"{remaining_s // 60}m"

        reauth_in = None
        if pro.credentials_should_be_deleted_at_time_ms is not None:
            days = (pro.credentials_should_be_deleted_at_time_ms - current_ms) // (24 * 3600 * 1000)
            reauth_in = f"{max(days, 0)}d"

        return {
            "connected": True,
            "email": pro.email or None,
            "token_valid": is_access_token_valid(pro, current_ms),
            "time_until_expiry": time_str,
            "reauth_in": reauth_in,
            "features": [f.feature_name for f in pro.enabled_pro_features],
        }

    @property
    def settings_file(self) -> Path:
        """Get the settings file path"""
        return self.settings_path
