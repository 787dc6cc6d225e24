"""PKCE (Proof Key for Code Exchange) generation and management"""

import base64
import hashlib
import json
import logging
import secrets
import string
from pathlib import Path
from typing import Optional

from settings import PRO_PKCE_FILE
from .models import PkceCodes

logger = logging.getLogger(__name__)

CODE_VERIFIER_LENGTH = 128
# URL-safe alphabet, every symbol is allowed in an RFC 7636 verifier
_VERIFIER_ALPHABET = string.ascii_letters + string.digits + "_-"


def generate_code_verifier(length: int = CODE_VERIFIER_LENGTH) -> str:
    """Generate a high-entropy random code verifier

    Args:
        length: Number of characters (default 128)

    Returns:
        Random URL-safe string
    """
    return "".join(secrets.choice(_VERIFIER_ALPHABET) for _ in range(length))


def code_verifier_to_code_challenge(code_verifier: Optional[str]) -> str:
    """Derive the S256 code challenge for a verifier

    BASE64URL-ENCODE(SHA256(ASCII(code_verifier))) without padding, see
    https://datatracker.ietf.org/doc/html/rfc7636

    dBjftJeZ4CVP-mB92K27uhbUJU1p1r_wW1gFWFOEjXk
    => E9Melhoa2OwvFrEMTJguCHaoeK1t8URWbuGJSstw-cM

    Args:
        code_verifier: The verifier string

    Returns:
        The challenge, or "" if the verifier is empty or cannot be hashed
    """
    if not code_verifier:
        return ""
    try:
        digest = hashlib.sha256(code_verifier.encode("utf-8")).digest()
    except (AttributeError, TypeError, ValueError) as e:
        # Let the exchange fail downstream instead of failing here
        logger.debug(f"Could not derive code challenge: {e}")
        return ""
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


def generate_pkce() -> PkceCodes:
    """Generate a fresh PKCE verifier/challenge pair"""
    code_verifier = generate_code_verifier()
    return PkceCodes(
        code_verifier=code_verifier,
        code_challenge=code_verifier_to_code_challenge(code_verifier),
    )


class PKCEManager:
    """Keeps the pending code verifier between login steps

    A login can start in one CLI invocation and finish in another, so the
    verifier is parked in a private file until the code is exchanged.
    """

    def __init__(self, pkce_file: Optional[str] = None):
        self.pkce_file = Path(pkce_file if pkce_file else PRO_PKCE_FILE)
        self.code_verifier: Optional[str] = None

    def generate_pkce(self) -> PkceCodes:
        """Generate PKCE codes and remember the verifier"""
        codes = generate_pkce()
        self.code_verifier = codes.code_verifier
        return codes

    def save_pkce(self) -> None:
        """Save the pending verifier to disk"""
        if not self.code_verifier:
            return

        self.pkce_file.parent.mkdir(parents=True, exist_ok=True)
        self.pkce_file.write_text(json.dumps({"code_verifier": self.code_verifier}, indent=2))
        # Set restrictive permissions
        self.pkce_file.chmod(0o600)

    def load_pkce(self) -> bool:
        """Load the pending verifier from disk

        Returns:
            True if a verifier was loaded
        """
        if not self.pkce_file.exists():
            return False

        try:
            data = json.loads(self.pkce_file.read_text())
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Ignoring unreadable PKCE file {self.pkce_file}: {e}")
            return False
        self.code_verifier = data.get("code_verifier")
        return bool(self.code_verifier)

    def clear_pkce(self) -> None:
        """Forget the pending verifier"""
        if self.pkce_file.exists():
            self.pkce_file.unlink()
        self.code_verifier = None
