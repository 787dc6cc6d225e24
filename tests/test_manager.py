"""Tests for the ProAccountManager facade and the CLI built on it."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from conftest import DAY_MS, form_body, now_ms, token_json
from pro_auth_cli import ProAuthCLI, build_parser
from pro_oauth import ProAccountManager
from pro_oauth.exceptions import AuthResponseError, EntitlementError
from pro_oauth.models import PluginSettings
from pro_oauth.pkce import PKCEManager
from utils.storage import SettingsStorage

TOKEN_PATH = "/api/v1/oauth2/token"
PRO_LIST_PATH = "/api/v1/pro/list"
PROFILE_PATH = "/api/v1/profile/list"


class TestProAccountManager:
    def test_full_connect_flow(self, pro_api, save) -> None:
        settings = PluginSettings(conflict_action="smart_conflict")
        manager = ProAccountManager(settings, "1.0.0", save)
        request = manager.generate_auth_url()

        pro_api.on(TOKEN_PATH, token_json("A", 3600, "R"))
        pro_api.on(PRO_LIST_PATH, {"proFeatures": [
            {"featureName": "feature-smart_conflict", "expireAtTimeMs": now_ms() + 30 * DAY_MS},
        ]})

        assert asyncio.run(manager.exchange_code(request.code_verifier, "code-1")) is True
        assert settings.pro.access_token == "A"
        assert settings.pro.refresh_token == "R"
        assert form_body(pro_api.calls(TOKEN_PATH)[0])["code_verifier"] == request.code_verifier

        asyncio.run(manager.refresh_features())
        assert asyncio.run(manager.check_runnable(["feature-smart_conflict"])) is True

    def test_exchange_transport_failure_returns_false(self, pro_api) -> None:
        pro_api.on(TOKEN_PATH, exc=httpx.ConnectError("down"))
        errors = []
        manager = ProAccountManager(PluginSettings(), "1.0.0")

        assert asyncio.run(manager.exchange_code("v", "c", errors.append)) is False
        assert len(errors) == 1

    def test_exchange_rejected_raises(self, pro_api) -> None:
        pro_api.on(TOKEN_PATH, {"error": "invalid_request"}, status_code=400)
        manager = ProAccountManager(PluginSettings(), "1.0.0")

        with pytest.raises(AuthResponseError):
            asyncio.run(manager.exchange_code("v", "c"))
        assert manager.settings.pro.access_token == ""


class TestProAuthCLI:
    @pytest.fixture
    def cli(self, tmp_path) -> ProAuthCLI:
        return ProAuthCLI(
            storage=SettingsStorage(str(tmp_path / "settings.json")),
            pkce_manager=PKCEManager(str(tmp_path / "pkce.json")),
        )

    def test_complete_login_persists_account(self, cli, pro_api, tmp_path) -> None:
        cli.pkce_manager.generate_pkce()
        cli.pkce_manager.save_pkce()
        pro_api.on(TOKEN_PATH, token_json("A", 3600, "R"))
        pro_api.on(PROFILE_PATH, {"email": "me@example.com"})
        pro_api.on(PRO_LIST_PATH, {"proFeatures": []})

        assert asyncio.run(cli.complete_login("code-1")) is True

        stored = SettingsStorage(str(tmp_path / "settings.json")).load_settings()
        assert stored.pro.refresh_token == "R"
        assert stored.pro.email == "me@example.com"
        assert not (tmp_path / "pkce.json").exists()

    def test_complete_login_without_pending_verifier(self, cli, pro_api) -> None:
        assert asyncio.run(cli.complete_login("code-1")) is False
        assert pro_api.requests == []

    def test_check_overrides_do_not_persist(self, cli, plugin_settings, tmp_path) -> None:
        cli.settings.pro = plugin_settings.pro
        cli.settings.conflict_action = "keep_newer"
        cli.settings.service_type = "s3"

        with pytest.raises(EntitlementError, match="Google Drive"):
            asyncio.run(cli.check(["feature-google_drive"], service_type="googledrive"))
        assert cli.settings.service_type == "s3"

    def test_logout_resets_pro_record(self, cli, plugin_settings, tmp_path) -> None:
        cli.settings.pro = plugin_settings.pro
        cli.logout()

        stored = SettingsStorage(str(tmp_path / "settings.json")).load_settings()
        assert stored.pro is not None
        assert stored.pro.refresh_token == ""

    def test_parser(self) -> None:
        args = build_parser().parse_args(["check", "feature-smart_conflict", "--conflict-action", "smart_conflict"])
        assert args.command == "check"
        assert args.features == ["feature-smart_conflict"]
        assert args.conflict_action == "smart_conflict"
