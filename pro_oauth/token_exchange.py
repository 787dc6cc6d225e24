"""Token endpoint requests for the PRO website"""

import logging
from typing import Any, Callable, Optional

import httpx

from settings import PRO_SCOPE, PRO_WEBSITE
from .authorization import get_client_id
from .models import AuthResponse, parse_auth_response
from .utils import maybe_await

logger = logging.getLogger(__name__)

TOKEN_ENDPOINT = f"{PRO_WEBSITE}/api/v1/oauth2/token"


async def _post_token_request(data: dict) -> AuthResponse:
    async with httpx.AsyncClient(timeout=None) as client:
        response = await client.post(TOKEN_ENDPOINT, data=data)

    logger.debug(f"Token endpoint response status: {response.status_code}")
    # The provider reports rejected grants in the body, not the status code
    return parse_auth_response(response.json())


async def send_auth_req(
    verifier: str,
    auth_code: str,
    error_callback: Optional[Callable[[Exception], Any]] = None
) -> Optional[AuthResponse]:
    """Exchange an authorization code for tokens

    Transport and parse failures are not raised: they are reported through
    error_callback and None is returned, so callers must check for None.

    Args:
        verifier: PKCE code verifier kept from the authorization step
        auth_code: Authorization code received by the host
        error_callback: Optional hook called (and awaited if needed) with the error

    Returns:
        AuthSuccess or AuthFailure, or None if the request failed
    """
    data = {
        "code": auth_code,
        "grant_type": "authorization_code",
        "code_verifier": verifier,
        "client_id": get_client_id(),
        "scope": PRO_SCOPE,
    }

    logger.info(f"Exchanging authorization code for tokens at {TOKEN_ENDPOINT}")
    try:
        return await _post_token_request(data)
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Token exchange failed: {e}")
        if error_callback is not None:
            await maybe_await(error_callback(e))
        return None


async def send_refresh_token_req(refresh_token: str) -> AuthResponse:
    """Mint a new access token from a refresh token

    Args:
        refresh_token: Long-lived refresh token

    Returns:
        AuthSuccess or AuthFailure

    Raises:
        httpx.HTTPError: If the request fails
        ValueError: If the response cannot be parsed
    """
    data = {
        "grant_type": "refresh_token",
        "refresh_token": refresh_token,
        "client_id": get_client_id(),
        "scope": PRO_SCOPE,
    }

    try:
        logger.info("start auto getting refreshed Remotely Save access token.")
        result = await _post_token_request(data)
        logger.info("finish auto getting refreshed Remotely Save access token.")
        return result
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Token refresh failed: {e}")
        raise
