"""Tests for the PRO data model and token response parsing."""

from __future__ import annotations

import pytest

from pro_oauth.models import (
    AuthFailure,
    AuthSuccess,
    FeatureInfo,
    PluginSettings,
    ProConfig,
    default_pro_config,
    parse_auth_response,
)


class TestParseAuthResponse:
    def test_success_with_refresh_token(self) -> None:
        res = parse_auth_response({"access_token": "a", "expires_in": 3600, "refresh_token": "r"})
        assert res == AuthSuccess(access_token="a", expires_in=3600, refresh_token="r")

    def test_success_without_refresh_token(self) -> None:
        res = parse_auth_response({"access_token": "a", "expires_in": 60})
        assert isinstance(res, AuthSuccess)
        assert res.refresh_token is None

    def test_error_wins_over_other_fields(self) -> None:
        res = parse_auth_response({"error": "invalid_request", "access_token": "a", "expires_in": 1})
        assert res == AuthFailure(error="invalid_request")

    @pytest.mark.parametrize(
        "payload",
        [
            [],
            {"expires_in": 3600},
            {"access_token": "a"},
            {"access_token": "a", "expires_in": "3600"},
            {"access_token": "a", "expires_in": True},
        ],
    )
    def test_malformed_payloads_raise(self, payload) -> None:
        with pytest.raises(ValueError):
            parse_auth_response(payload)

    def test_fractional_expires_in_is_kept(self) -> None:
        res = parse_auth_response({"access_token": "a", "expires_in": 1.5})
        assert res.expires_in == 1.5


class TestProConfig:
    def test_defaults_are_empty(self) -> None:
        config = default_pro_config()
        assert config.access_token == ""
        assert config.access_token_expires_in_ms == 0
        assert config.access_token_expires_at_time_ms == 0
        assert config.refresh_token == ""
        assert config.credentials_should_be_deleted_at_time_ms is None
        assert config.enabled_pro_features == []
        assert config.email == ""

    def test_default_instances_are_independent(self) -> None:
        a = default_pro_config()
        b = default_pro_config()
        a.enabled_pro_features.append(FeatureInfo("feature-google_drive", 1))
        assert b.enabled_pro_features == []

    def test_camel_case_serialization(self) -> None:
        config = ProConfig(
            access_token="T",
            access_token_expires_in_ms=1000,
            access_token_expires_at_time_ms=2000,
            refresh_token="R",
            credentials_should_be_deleted_at_time_ms=3000,
            enabled_pro_features=[FeatureInfo("feature-smart_conflict", 4000)],
            email="a@b.c",
        )
        data = config.to_dict()
        assert data["accessTokenExpiresAtTimeMs"] == 2000
        assert data["enabledProFeatures"] == [{"featureName": "feature-smart_conflict", "expireAtTimeMs": 4000}]
        assert ProConfig.from_dict(data) == config

    def test_unset_deletion_time_is_omitted(self) -> None:
        assert "credentialsShouldBeDeletedAtTimeMs" not in default_pro_config().to_dict()

    def test_missing_refresh_token_is_none(self) -> None:
        config = ProConfig.from_dict({"accessToken": "T"})
        assert config.refresh_token is None
        assert "refreshToken" not in config.to_dict()

    def test_empty_refresh_token_survives_round_trip(self) -> None:
        data = default_pro_config().to_dict()
        assert data["refreshToken"] == ""
        assert ProConfig.from_dict(data).refresh_token == ""


class TestPluginSettings:
    def test_without_pro_record(self) -> None:
        settings = PluginSettings.from_dict({"conflictAction": "smart_conflict", "serviceType": "googledrive"})
        assert settings.pro is None
        assert settings.conflict_action == "smart_conflict"
        assert settings.service_type == "googledrive"
        assert "pro" not in settings.to_dict()

    @pytest.mark.parametrize("data", [[], "x", 1])
    def test_non_object_raises(self, data) -> None:
        with pytest.raises(ValueError):
            PluginSettings.from_dict(data)

    def test_non_object_pro_record_raises(self) -> None:
        with pytest.raises(ValueError):
            PluginSettings.from_dict({"pro": "x"})
