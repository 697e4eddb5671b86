"""Tests for the WhatsApp channel helpers."""

import hashlib
import hmac
import json

import httpx
import pytest

from menubot.channels import WhatsAppChannel, extract_message, verify_signature


def _sign(secret: str, body: bytes) -> str:
    return "sha256=" + hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


class TestWhatsAppChannel:
    """Tests for WhatsAppChannel.send_text()."""

    async def test_send_text_posts_message(self):
        """Test the request shape sent to the Graph API."""
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"messages": [{"id": "wamid.1"}]})

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        channel = WhatsAppChannel("token-1", "555", api_version="v22.0", client=client)

        await channel.send_text("97455550101", "Done ✅")
        await channel.close()

        assert len(requests) == 1
        request = requests[0]
        assert str(request.url) == "https://graph.facebook.com/v22.0/555/messages"
        assert request.headers["Authorization"] == "Bearer token-1"
        assert json.loads(request.content) == {
            "messaging_product": "whatsapp",
            "to": "97455550101",
            "type": "text",
            "text": {"body": "Done ✅"},
        }

    async def test_send_failure_is_logged_not_raised(self):
        """Test that an API error does not propagate."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"error": "boom"})

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        channel = WhatsAppChannel("token-1", "555", client=client)

        await channel.send_text("97455550101", "hi")
        await channel.close()

    async def test_missing_credentials_drop_reply(self):
        """Test that nothing is sent without a token."""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        channel = WhatsAppChannel(None, "555", client=client)

        await channel.send_text("97455550101", "hi")
        await channel.close()

        assert calls == []


class TestVerifySignature:
    """Tests for verify_signature()."""

    def test_valid(self):
        body = b'{"entry": []}'
        assert verify_signature("secret", body, _sign("secret", body))

    def test_wrong_secret(self):
        body = b'{"entry": []}'
        assert not verify_signature("secret", body, _sign("other", body))

    def test_tampered_body(self):
        assert not verify_signature("secret", b"{}", _sign("secret", b"[]"))

    @pytest.mark.parametrize("secret, header", [(None, "sha256=00"), ("secret", None)])
    def test_missing_inputs(self, secret, header):
        assert not verify_signature(secret, b"{}", header)


class TestExtractMessage:
    """Tests for extract_message()."""

    def test_text_message(self):
        payload = {
            "entry": [
                {
                    "changes": [
                        {
                            "value": {
                                "messages": [
                                    {"from": "97455550101", "id": "wamid.1", "type": "text"}
                                ]
                            }
                        }
                    ]
                }
            ]
        }
        assert extract_message(payload)["id"] == "wamid.1"

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"entry": []},
            {"entry": [{"changes": [{"value": {"statuses": [{"id": "x"}]}}]}]},
            {"entry": [{"changes": [{"value": {"messages": []}}]}]},
            [],
        ],
    )
    def test_no_message(self, payload):
        assert extract_message(payload) is None
