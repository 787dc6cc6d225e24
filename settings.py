from pathlib import Path
from config.loader import get_config_loader

# Get the config loader instance
config = get_config_loader()

# Logging configuration
LOG_LEVEL = config.get("LOG_LEVEL", "info")

# PRO website configuration (hardcoded - not user configurable)
# A single fixed authorization server and client id
PRO_WEBSITE = "https://remotelysave.com"
PRO_CLIENT_ID = "cli-remotely-save-pro"
COMMAND_CALLBACK_PRO = "remotely-save-cb-pro"
PRO_SCOPE = "pro.list.read"
PLUGIN_VERSION_HEADER = "REMOTELYSAVE-API-Plugin-Ver"

# Token lifetime bookkeeping
# Access tokens are treated as expired 5 minutes before the provider says so
ACCESS_TOKEN_SAFETY_MARGIN_MS = 5 * 60 * 1000
# Credentials must be re-authorized 80 days after the last successful auth
OAUTH2_FORCE_EXPIRE_MILLISECONDS = 80 * 24 * 60 * 60 * 1000
# Cached feature expiry further out than this is considered stale
FEATURE_MAX_AHEAD_MS = 40 * 24 * 60 * 60 * 1000

# Host plugin version sent with every PRO API request
PLUGIN_VERSION = config.get("PLUGIN_VERSION", "0.5.0")

# Settings storage
PRO_SETTINGS_FILE = config.get("PRO_SETTINGS_FILE", str(Path.home() / ".remotely-save-pro" / "settings.json"))
PRO_PKCE_FILE = config.get("PRO_PKCE_FILE", str(Path.home() / ".remotely-save-pro" / "pkce.json"))
