"""
Phone number verification through the Firebase Identity Toolkit API.
"""

import re
import httpx
from typing import Optional, Dict, Any
from address6d.core.exceptions import UpstreamUnavailableError, VerificationRejectedError
from address6d.core.logging_config import logger
from address6d.schemas.verification import VerifiedPhone

DEFAULT_COUNTRY_PREFIX = "+252"
SOMALI_MOBILE_PATTERN = r"^\+252(61|62|63|65|68|90)\d{7}$"


def normalize_phone_number(
    raw: str,
    country_prefix: str = DEFAULT_COUNTRY_PREFIX,
    pattern: str = SOMALI_MOBILE_PATTERN
) -> str:
    """
    Normalize a phone number to E.164 and check it against the accepted numbering plan.

    Numbers already starting with '+' are kept; local numbers lose their
    leading zeros and get the country prefix.

    Raises:
        ValueError: If the result does not match pattern
    """
    number = re.sub(r"[\s\-()]", "", raw or "")
    if not number.startswith("+"):
        number = f"{country_prefix}{number.lstrip('0')}"
    if not re.match(pattern, number):
        raise ValueError(f"Invalid mobile number: {raw!r}")
    return number


class PhoneVerificationService:
    """Client for the Identity Toolkit phone sign-in endpoints."""

    BASE_URL = "https://identitytoolkit.googleapis.com/v1"

    def __init__(
        self,
        api_key: Optional[str],
        timeout: float = 10.0,
        max_retries: int = 2,
        phone_pattern: str = SOMALI_MOBILE_PATTERN,
        transport: Optional[httpx.BaseTransport] = None
    ):
        self.api_key = api_key
        self.phone_pattern = phone_pattern
        self.timeout = timeout
        self.max_retries = max_retries
        self.transport = transport
        if not self.api_key:
            logger.warning("FIREBASE_WEB_API_KEY not set. Phone verification will fail.")

    def normalize(self, raw: str) -> str:
        return normalize_phone_number(raw, pattern=self.phone_pattern)

    def send_code(self, phone_number: str, recaptcha_token: str) -> str:
        """
        Ask the provider to text a verification code to the phone.

        Args:
            phone_number: E.164 phone number
            recaptcha_token: reCAPTCHA response obtained by the client

        Returns:
            Opaque session info to pass to confirm_code
        """
        data = self._post(
            "accounts:sendVerificationCode",
            {"phoneNumber": phone_number, "recaptchaToken": recaptcha_token}
        )
        session_info = data.get("sessionInfo")
        if not session_info:
            raise UpstreamUnavailableError("phone verification", "No session info returned")
        logger.info(f"Verification code sent to {_mask(phone_number)}")
        return session_info

    def confirm_code(self, session_info: str, code: str) -> VerifiedPhone:
        """
        Exchange the code the user received for an identity token.

        Args:
            session_info: Value returned by send_code
            code: Code entered by the user

        Returns:
            VerifiedPhone carrying the ID token and verified number
        """
        data = self._post(
            "accounts:signInWithPhoneNumber",
            {"sessionInfo": session_info, "code": code}
        )
        id_token = data.get("idToken")
        if not id_token:
            raise UpstreamUnavailableError("phone verification", "No ID token returned")
        logger.info(f"Phone verified: uid={data.get('localId')}")
        return VerifiedPhone(
            id_token=id_token,
            phone_number=data.get("phoneNumber", ""),
            uid=data.get("localId"),
            refresh_token=data.get("refreshToken")
        )

    def _post(self, method: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        POST to an Identity Toolkit method, retrying transport errors and 5xx.

        Raises:
            VerificationRejectedError: On 4xx responses
            UpstreamUnavailableError: When retries are exhausted or unconfigured
        """
        if not self.api_key:
            raise UpstreamUnavailableError("phone verification", "Service not configured")

        url = f"{self.BASE_URL}/{method}"
        last_error = ""

        for attempt in range(self.max_retries + 1):
            try:
                with httpx.Client(transport=self.transport, timeout=self.timeout) as client:
                    response = client.post(url, params={"key": self.api_key}, json=payload)
                    response.raise_for_status()
                    return response.json()
            except httpx.HTTPStatusError as e:
                if e.response.status_code < 500:
                    reason = _error_message(e.response)
                    logger.warning(f"Phone verification rejected ({method}): {reason}")
                    raise VerificationRejectedError(reason)
                last_error = f"HTTP {e.response.status_code}"
            except httpx.TransportError as e:
                last_error = str(e) or type(e).__name__

            logger.warning(
                f"Phone verification attempt {attempt + 1}/{self.max_retries + 1} "
                f"failed ({method}): {last_error}"
            )

        raise UpstreamUnavailableError("phone verification", last_error)


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json().get("error", {}).get("message", "Verification failed")
    except ValueError:
        return "Verification failed"


def _mask(phone_number: str) -> str:
    return f"{phone_number[:4]}***{phone_number[-2:]}"
