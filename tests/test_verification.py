import json

import httpx
import pytest

from address6d.core.exceptions import UpstreamUnavailableError, VerificationRejectedError
from address6d.services.verification import PhoneVerificationService, normalize_phone_number


def make_service(handler, max_retries=2):
    return PhoneVerificationService(
        api_key="test-key",
        timeout=1.0,
        max_retries=max_retries,
        transport=httpx.MockTransport(handler)
    )


class TestNormalizePhoneNumber:
    @pytest.mark.parametrize("raw,expected", [
        ("+252612345678", "+252612345678"),
        ("0612345678", "+252612345678"),
        ("612345678", "+252612345678"),
        ("061 234-5678", "+252612345678"),
    ])
    def test_normalizes(self, raw, expected):
        assert normalize_phone_number(raw) == expected

    @pytest.mark.parametrize("raw", ["", "abc", "+25261abc", "+12", "+15551234567", "01234567", "+252641234567"])
    def test_rejects(self, raw):
        with pytest.raises(ValueError):
            normalize_phone_number(raw)

    def test_custom_pattern(self):
        assert normalize_phone_number("+15551234567", pattern=r"^\+1\d{10}$") == "+15551234567"

    def test_service_uses_configured_pattern(self):
        service = PhoneVerificationService(api_key=None, phone_pattern=r"^\+25261\d{7}$")
        assert service.normalize("0612345678") == "+252612345678"
        with pytest.raises(ValueError):
            service.normalize("0622345678")


class TestPhoneVerificationService:
    def test_send_code(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"sessionInfo": "session-123"})

        session_info = make_service(handler).send_code("+252612345678", "captcha")

        assert session_info == "session-123"
        assert "accounts:sendVerificationCode" in seen["url"]
        assert "key=test-key" in seen["url"]
        assert seen["body"] == {"phoneNumber": "+252612345678", "recaptchaToken": "captcha"}

    def test_confirm_code(self):
        def handler(request):
            return httpx.Response(200, json={
                "idToken": "id-token",
                "refreshToken": "refresh-token",
                "localId": "uid-1",
                "phoneNumber": "+252612345678",
            })

        verified = make_service(handler).confirm_code("session-123", "123456")

        assert verified.id_token == "id-token"
        assert verified.uid == "uid-1"
        assert verified.phone_number == "+252612345678"

    def test_rejected_code_is_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(400, json={"error": {"code": 400, "message": "INVALID_CODE"}})

        with pytest.raises(VerificationRejectedError, match="INVALID_CODE"):
            make_service(handler).confirm_code("session-123", "000000")
        assert len(calls) == 1

    def test_server_errors_retried_then_unavailable(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503)

        with pytest.raises(UpstreamUnavailableError):
            make_service(handler, max_retries=2).send_code("+252612345678", "captcha")
        assert len(calls) == 3

    def test_transport_error_recovers_on_retry(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) == 1:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json={"sessionInfo": "session-456"})

        assert make_service(handler).send_code("+252612345678", "captcha") == "session-456"
        assert len(calls) == 2

    def test_not_configured(self):
        service = PhoneVerificationService(api_key=None)
        with pytest.raises(UpstreamUnavailableError):
            service.send_code("+252612345678", "captcha")


class TestVerificationEndpoints:
    def test_send_normalizes_number(self, app, client):
        app.state.verification_service = make_service(
            lambda request: httpx.Response(200, json={"sessionInfo": "session-123"})
        )

        response = client.post(
            "/api/verification/send",
            json={"phone_number": "0612345678", "recaptcha_token": "captcha"}
        )

        assert response.status_code == 200
        assert response.json() == {"phone_number": "+252612345678", "session_info": "session-123"}

    def test_send_invalid_number(self, client):
        response = client.post(
            "/api/verification/send",
            json={"phone_number": "not-a-number", "recaptcha_token": "captcha"}
        )
        assert response.status_code == 400

    def test_send_rejects_foreign_number(self, client):
        response = client.post(
            "/api/verification/send",
            json={"phone_number": "+15551234567", "recaptcha_token": "captcha"}
        )
        assert response.status_code == 400

    def test_confirm_wrong_code(self, app, client):
        app.state.verification_service = make_service(
            lambda request: httpx.Response(400, json={"error": {"message": "INVALID_CODE"}})
        )

        response = client.post(
            "/api/verification/confirm",
            json={"session_info": "session-123", "code": "000000"}
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "INVALID_CODE"

    def test_provider_unavailable(self, client):
        response = client.post(
            "/api/verification/confirm",
            json={"session_info": "session-123", "code": "123456"}
        )
        assert response.status_code == 503
