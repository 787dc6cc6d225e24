"""Data models for Remotely Save PRO authentication"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Union


PRO_FEATURE_TYPE = Literal["feature-smart_conflict", "feature-google_drive"]


@dataclass
class FeatureInfo:
    """A single entitled PRO feature

    Attributes:
        feature_name: Feature identifier, e.g. "feature-smart_conflict"
        expire_at_time_ms: Epoch milliseconds after which the entitlement lapses
    """
    feature_name: str
    expire_at_time_ms: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FeatureInfo":
        return cls(
            feature_name=data["featureName"],
            expire_at_time_ms=int(data["expireAtTimeMs"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "featureName": self.feature_name,
            "expireAtTimeMs": self.expire_at_time_ms,
        }


@dataclass
class ProConfig:
    """PRO account record owned by the host plugin

    Only fields are mutated in place; the record is never replaced.

    Attributes:
        access_token: Current bearer token, empty if none
        access_token_expires_in_ms: Lifetime reported by the provider
        access_token_expires_at_time_ms: Local expiry with a 5 minute margin
        refresh_token: Long-lived credential used to mint access tokens, None if absent
        credentials_should_be_deleted_at_time_ms: Hard re-authorization cutoff
        enabled_pro_features: Cached entitlement snapshot
        email: Cached profile email
    """
    access_token: str = ""
    access_token_expires_in_ms: int = 0
    access_token_expires_at_time_ms: int = 0
    refresh_token: Optional[str] = ""
    credentials_should_be_deleted_at_time_ms: Optional[int] = None
    enabled_pro_features: List[FeatureInfo] = field(default_factory=list)
    email: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProConfig":
        if not isinstance(data, dict):
            raise ValueError(f"Expected a PRO config object, got {type(data).__name__}")
        return cls(
            access_token=data.get("accessToken", ""),
            access_token_expires_in_ms=data.get("accessTokenExpiresInMs", 0),
            access_token_expires_at_time_ms=data.get("accessTokenExpiresAtTimeMs", 0),
            refresh_token=data.get("refreshToken"),
            credentials_should_be_deleted_at_time_ms=data.get("credentialsShouldBeDeletedAtTimeMs"),
            enabled_pro_features=[
                FeatureInfo.from_dict(f) for f in data.get("enabledProFeatures", [])
            ],
            email=data.get("email", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "accessToken": self.access_token,
            "accessTokenExpiresInMs": self.access_token_expires_in_ms,
            "accessTokenExpiresAtTimeMs": self.access_token_expires_at_time_ms,
            "enabledProFeatures": [f.to_dict() for f in self.enabled_pro_features],
            "email": self.email,
        }
        if self.refresh_token is not None:
            data["refreshToken"] = self.refresh_token
        if self.credentials_should_be_deleted_at_time_ms is not None:
            data["credentialsShouldBeDeletedAtTimeMs"] = self.credentials_should_be_deleted_at_time_ms
        return data


def default_pro_config() -> ProConfig:
    """Return a fresh, empty PRO config (nothing connected yet)"""
    return ProConfig()


@dataclass
class PluginSettings:
    """The part of the host plugin settings that PRO checks depend on

    Attributes:
        pro: PRO account record, None if the account was never connected
        conflict_action: Host conflict handling mode, e.g. "smart_conflict"
        service_type: Remote storage type, e.g. "googledrive"
    """
    pro: Optional[ProConfig] = None
    conflict_action: str = "keep_newer"
    service_type: str = "s3"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PluginSettings":
        if not isinstance(data, dict):
            raise ValueError(f"Expected a settings object, got {type(data).__name__}")
        pro = data.get("pro")
        return cls(
            pro=ProConfig.from_dict(pro) if pro is not None else None,
            conflict_action=data.get("conflictAction", "keep_newer"),
            service_type=data.get("serviceType", "s3"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "conflictAction": self.conflict_action,
            "serviceType": self.service_type,
        }
        if self.pro is not None:
            data["pro"] = self.pro.to_dict()
        return data


@dataclass
class AuthSuccess:
    """Successful token endpoint response

    Attributes:
        access_token: New bearer token
        expires_in: Token lifetime in seconds
        refresh_token: New refresh token, if the provider rotated it
    """
    access_token: str
    expires_in: Union[int, float]
    refresh_token: Optional[str] = None


@dataclass
class AuthFailure:
    """Token endpoint response carrying an error"""
    error: str = "invalid_request"


AuthResponse = Union[AuthSuccess, AuthFailure]


def parse_auth_response(payload: Any) -> AuthResponse:
    """Build a typed token response from decoded JSON

    Args:
        payload: Decoded JSON body of the token endpoint

    Returns:
        AuthFailure if the body carries an error, AuthSuccess otherwise

    Raises:
        ValueError: If the body is not a valid success or error response
    """
    if not isinstance(payload, dict):
        raise ValueError(f"Unexpected token response type: {type(payload).__name__}")

    error = payload.get("error")
    if error is not None:
        return AuthFailure(error=str(error))

    access_token = payload.get("access_token")
    expires_in = payload.get("expires_in")
    if not access_token or not isinstance(expires_in, (int, float)) or isinstance(expires_in, bool):
        raise ValueError("Token response missing access_token or expires_in")

    return AuthSuccess(
        access_token=access_token,
        expires_in=expires_in,
        refresh_token=payload.get("refresh_token") or None,
    )


@dataclass
class PkceCodes:
    """PKCE (Proof Key for Code Exchange) codes for OAuth flow

    Attributes:
        code_verifier: Random string used to generate code_challenge
        code_challenge: SHA256 hash of code_verifier, sent in auth request
    """
    code_verifier: str
    code_challenge: str


@dataclass
class AuthorizationRequest:
    """Authorization URL together with the PKCE pair it was built from

    The verifier must be kept by the caller to complete the code exchange.
    """
    auth_url: str
    code_verifier: str
    code_challenge: str
