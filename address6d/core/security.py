import re
import time
import threading
from typing import Dict, Optional

import httpx
from jose import jwt
from jose.exceptions import JOSEError
from pydantic import BaseModel

from address6d.core.logging_config import logger

ALGORITHM = "RS256"
DEFAULT_CERTS_MAX_AGE = 3600


class InvalidIdentityToken(Exception):
    """Raised when an identity token fails verification."""


class IdentityClaims(BaseModel):
    uid: str
    phone_number: Optional[str] = None


class FirebaseTokenVerifier:
    """
    Verifies Firebase ID tokens issued after phone-number sign-in.

    Google's signing certificates are fetched over HTTP and cached for as long
    as the Cache-Control header allows.
    """

    def __init__(
        self,
        project_id: Optional[str],
        certs_url: str,
        timeout: float = 10.0,
        leeway: int = 60,
        transport: Optional[httpx.BaseTransport] = None
    ):
        self.project_id = project_id
        self.certs_url = certs_url
        self.timeout = timeout
        self.leeway = leeway
        self.transport = transport
        self._certs: Dict[str, str] = {}
        self._certs_expire_at = 0.0
        self._lock = threading.Lock()
        if not project_id:
            logger.warning("FIREBASE_PROJECT_ID not set - identity tokens will be rejected")

    @property
    def issuer(self) -> str:
        return f"https://securetoken.google.com/{self.project_id}"

    def verify(self, token: str) -> IdentityClaims:
        """
        Verify a Firebase ID token and return its identity claims.

        Args:
            token: Encoded JWT from the Authorization header

        Returns:
            IdentityClaims with the Firebase uid and verified phone number

        Raises:
            InvalidIdentityToken: If the token is malformed, expired, signed
                by an unknown key or issued for another project
        """
        if not self.project_id:
            raise InvalidIdentityToken("Identity verification is not configured")

        try:
            header = jwt.get_unverified_header(token)
        except JOSEError as e:
            raise InvalidIdentityToken(f"Malformed token: {str(e)}")

        if header.get("alg") != ALGORITHM:
            raise InvalidIdentityToken(f"Unexpected signing algorithm: {header.get('alg')}")

        kid = header.get("kid")
        cert = self._get_certs().get(kid) if kid else None
        if cert is None:
            raise InvalidIdentityToken("Token signed by an unknown key")

        try:
            payload = jwt.decode(
                token,
                cert,
                algorithms=[ALGORITHM],
                audience=self.project_id,
                issuer=self.issuer,
                options={"leeway": self.leeway}
            )
        except JOSEError as e:
            raise InvalidIdentityToken(str(e))

        uid = payload.get("sub")
        if not uid:
            raise InvalidIdentityToken("Token has no subject")

        return IdentityClaims(uid=uid, phone_number=payload.get("phone_number"))

    def _get_certs(self) -> Dict[str, str]:
        with self._lock:
            if self._certs and time.monotonic() < self._certs_expire_at:
                return self._certs

            try:
                with httpx.Client(transport=self.transport, timeout=self.timeout) as client:
                    response = client.get(self.certs_url)
                    response.raise_for_status()
                    certs = response.json()
            except httpx.HTTPError as e:
                logger.error(f"Failed to fetch token signing certificates: {str(e)}")
                if self._certs:
                    return self._certs
                raise InvalidIdentityToken("Signing certificates unavailable")

            self._certs = certs
            self._certs_expire_at = time.monotonic() + _max_age(
                response.headers.get("cache-control", "")
            )
            return self._certs


def _max_age(cache_control: str) -> int:
    match = re.search(r"max-age=(\d+)", cache_control)
    return int(match.group(1)) if match else DEFAULT_CERTS_MAX_AGE


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an 'Authorization: Bearer <token>' header value."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    token = authorization.replace("Bearer ", "", 1).strip()
    return token or None
