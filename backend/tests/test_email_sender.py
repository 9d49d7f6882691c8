"""
Email provider adapter tests.

Uses httpx.MockTransport so no request ever leaves the process. Covers the
wire format of each provider, success/failure classification and the
provider registry.
"""

import json

import httpx
import pytest

from app.config import Settings
from app.models.contact import (
    Delivered,
    OutboundEmail,
    ProviderRejected,
    TransportFailure,
)
from app.services.email_sender import (
    MAILCHANNELS_URL,
    RESEND_URL,
    MailChannelsProvider,
    ResendProvider,
    _HttpJsonProvider,
    build_email_provider,
)


def _message() -> OutboundEmail:
    return OutboundEmail(
        from_email="noreply@nordvind-ai.de",
        from_name="Nordvind AI Kontaktformular",
        to_email="kontakt@nordvind-ai.de",
        to_name="Nordvind AI",
        reply_to_email="erika@example.de",
        reply_to_name="Erika Mustermann",
        subject="Neue Kontaktanfrage: Erika Mustermann",
        text="plain body",
        html="<p>html body</p>",
    )


def _recording_client(status_code: int = 202, text: str = ""):
    """Return (client, requests) where requests collects every sent request."""
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status_code, text=text)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler)), requests


def _settings(**overrides) -> Settings:
    values = {"to_email": "kontakt@nordvind-ai.de", "from_email": "noreply@nordvind-ai.de"}
    values.update(overrides)
    return Settings(**values)


# ---------------------------------------------------------------------------
# MailChannels
# ---------------------------------------------------------------------------

class TestMailChannelsProvider:
    @pytest.mark.asyncio
    async def test_payload_shape(self):
        client, requests = _recording_client(202)
        provider = MailChannelsProvider(url=MAILCHANNELS_URL, client=client)

        outcome = await provider.send(_message())

        assert outcome == Delivered(status_code=202)
        assert len(requests) == 1
        request = requests[0]
        assert request.method == "POST"
        assert str(request.url) == MAILCHANNELS_URL

        body = json.loads(request.content)
        assert body["personalizations"] == [
            {"to": [{"email": "kontakt@nordvind-ai.de", "name": "Nordvind AI"}]}
        ]
        assert body["from"] == {
            "email": "noreply@nordvind-ai.de",
            "name": "Nordvind AI Kontaktformular",
        }
        assert body["reply_to"] == {"email": "erika@example.de", "name": "Erika Mustermann"}
        assert body["subject"] == "Neue Kontaktanfrage: Erika Mustermann"
        assert body["content"] == [
            {"type": "text/plain", "value": "plain body"},
            {"type": "text/html", "value": "<p>html body</p>"},
        ]

    @pytest.mark.asyncio
    async def test_api_key_header_only_when_configured(self):
        client, requests = _recording_client(202)
        await MailChannelsProvider(url=MAILCHANNELS_URL, client=client).send(_message())
        assert "x-api-key" not in requests[0].headers

        client, requests = _recording_client(202)
        await MailChannelsProvider(
            url=MAILCHANNELS_URL, api_key="mc-key", client=client
        ).send(_message())
        assert requests[0].headers["x-api-key"] == "mc-key"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [200, 202])
    async def test_success_statuses(self, status_code):
        client, _ = _recording_client(status_code)
        provider = MailChannelsProvider(url=MAILCHANNELS_URL, client=client)

        assert await provider.send(_message()) == Delivered(status_code=status_code)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [201, 400, 401, 500, 503])
    async def test_other_statuses_are_rejections(self, status_code):
        client, _ = _recording_client(status_code, text="bad sender domain")
        provider = MailChannelsProvider(url=MAILCHANNELS_URL, client=client)

        outcome = await provider.send(_message())

        assert outcome == ProviderRejected(status_code=status_code, body="bad sender domain")

    @pytest.mark.asyncio
    async def test_network_error_is_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        provider = MailChannelsProvider(url=MAILCHANNELS_URL, client=client)

        outcome = await provider.send(_message())

        assert isinstance(outcome, TransportFailure)
        assert isinstance(outcome.error, httpx.ConnectError)


# ---------------------------------------------------------------------------
# Resend
# ---------------------------------------------------------------------------

class TestResendProvider:
    @pytest.mark.asyncio
    async def test_payload_shape_and_auth(self):
        client, requests = _recording_client(200, text='{"id": "abc"}')
        provider = ResendProvider(url=RESEND_URL, api_key="re_123", client=client)

        outcome = await provider.send(_message())

        assert outcome == Delivered(status_code=200)
        request = requests[0]
        assert str(request.url) == RESEND_URL
        assert request.headers["authorization"] == "Bearer re_123"

        body = json.loads(request.content)
        assert body == {
            "from": "Nordvind AI Kontaktformular <noreply@nordvind-ai.de>",
            "to": ["Nordvind AI <kontakt@nordvind-ai.de>"],
            "reply_to": "Erika Mustermann <erika@example.de>",
            "subject": "Neue Kontaktanfrage: Erika Mustermann",
            "text": "plain body",
            "html": "<p>html body</p>",
        }

    @pytest.mark.asyncio
    async def test_validation_error_is_rejection(self):
        client, _ = _recording_client(422, text='{"message": "invalid from"}')
        provider = ResendProvider(url=RESEND_URL, api_key="re_123", client=client)

        outcome = await provider.send(_message())

        assert outcome == ProviderRejected(status_code=422, body='{"message": "invalid from"}')


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class TestBuildEmailProvider:
    def test_default_is_mailchannels(self):
        provider = build_email_provider(_settings())

        assert isinstance(provider, MailChannelsProvider)
        assert provider.url == MAILCHANNELS_URL
        assert provider.timeout == 10.0

    def test_resend_requires_api_key(self):
        with pytest.raises(ValueError, match="EMAIL_API_KEY"):
            build_email_provider(_settings(email_provider="resend"))

    def test_resend_with_key(self):
        provider = build_email_provider(
            _settings(email_provider="resend", email_api_key="re_123")
        )

        assert isinstance(provider, ResendProvider)
        assert provider.url == RESEND_URL
        assert provider.api_key == "re_123"

    def test_url_override(self):
        provider = build_email_provider(
            _settings(email_api_url="https://sandbox.example/send", email_timeout_seconds=3)
        )

        assert provider.url == "https://sandbox.example/send"
        assert provider.timeout == 3

    def test_unknown_provider_raises(self):
        with pytest.raises(ValueError, match="Unknown email provider"):
            build_email_provider(_settings(email_provider="carrier-pigeon"))


class TestHttpJsonProviderBase:
    def test_provider_without_payload_builder_cannot_be_created(self):
        class IncompleteProvider(_HttpJsonProvider):
            name = "incomplete"

        with pytest.raises(TypeError):
            IncompleteProvider(url="https://example.invalid/send")

    def test_base_class_is_abstract(self):
        with pytest.raises(TypeError):
            _HttpJsonProvider(url="https://example.invalid/send")
