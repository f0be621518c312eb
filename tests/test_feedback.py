"""Tests for feedback validation, Discord delivery and Turnstile checks."""

import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from urllib.parse import parse_qs

import httpx
import pytest

from inobot.configs.system import FeedbackConfig
from inobot.core.errors import (
    ConfigurationError,
    InputValidationError,
    NotificationError,
)
from inobot.core.feedback import (
    CaptchaOutcome,
    ClientContext,
    DiscordWebhookNotifier,
    FeedbackImage,
    FeedbackService,
    FeedbackSubmission,
    TurnstileVerifier,
    build_embed,
    parse_user_agent,
    validate_submission,
)
from inobot.core.feedback.validation import validate_image

WEBHOOK = "https://discord.example.com/api/webhooks/1/abc"

CHROME_WINDOWS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
CHROME_ANDROID = (
    "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Mobile Safari/537.36"
)
SAFARI_IPAD = (
    "Mozilla/5.0 (iPad; CPU OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
)


def _submission(**kwargs) -> FeedbackSubmission:
    values = {
        "type": "bug",
        "subject": "Answer cut off",
        "description": "The reply stopped mid-sentence.",
    }
    values.update(kwargs)
    return FeedbackSubmission(**values)


def _png(size: int = 16) -> FeedbackImage:
    return FeedbackImage(filename="shot.png", content_type="image/png", data=b"x" * size)


class TestValidateSubmission:
    def _validate(self, **overrides):
        fields = {
            "feedback_type": "improvement",
            "subject": "  Dark mode  ",
            "description": "Please add a dark theme.",
            "contact_email": "",
            "image": None,
            "config": FeedbackConfig(),
        }
        fields.update(overrides)
        return validate_submission(**fields)

    def test_valid(self):
        submission = self._validate()

        assert submission.type == "improvement"
        assert submission.subject == "Dark mode"
        assert submission.contact_email is None
        assert submission.image is None

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"feedback_type": "praise"}, "Invalid feedback type"),
            ({"feedback_type": None}, "Invalid feedback type"),
            ({"subject": "   "}, "Subject is required"),
            ({"subject": "s" * 201}, "Subject must be 200 characters or less"),
            ({"description": None}, "Description is required"),
            (
                {"description": "d" * 2001},
                "Description must be 2000 characters or less",
            ),
            (
                {"contact_email": "c" * 101},
                "Contact info must be 100 characters or less",
            ),
        ],
    )
    def test_rejections(self, overrides, message):
        with pytest.raises(InputValidationError) as excinfo:
            self._validate(**overrides)

        assert str(excinfo.value) == message

    def test_type_checked_before_subject(self):
        with pytest.raises(InputValidationError, match="Invalid feedback type"):
            self._validate(feedback_type="x", subject="")


class TestValidateImage:
    def test_empty_image_dropped(self):
        empty = FeedbackImage(filename="a.png", content_type="image/png", data=b"")
        assert validate_image(empty, FeedbackConfig()) is None

    def test_too_large(self):
        config = FeedbackConfig(max_image_bytes=1024 * 1024)

        with pytest.raises(InputValidationError, match="less than 1MB"):
            validate_image(_png(1024 * 1024 + 1), config)

    def test_must_be_image(self):
        pdf = FeedbackImage(filename="a.pdf", content_type="application/pdf", data=b"%")

        with pytest.raises(InputValidationError, match="File must be an image"):
            validate_image(pdf, FeedbackConfig())

    def test_accepted(self):
        image = _png()
        assert validate_image(image, FeedbackConfig()) is image


class TestParseUserAgent:
    @pytest.mark.parametrize(
        "user_agent, browser, os_name, device",
        [
            (CHROME_WINDOWS, "Chrome", "Windows", "Desktop"),
            (CHROME_ANDROID, "Chrome", "Android", "Mobile"),
            (SAFARI_IPAD, "Safari", "iOS", "Tablet"),
            ("curl/8.4.0", "Unknown", "Unknown", "Desktop"),
        ],
    )
    def test_parse(self, user_agent, browser, os_name, device):
        info = parse_user_agent(user_agent)

        assert (info.browser, info.os, info.device) == (browser, os_name, device)


class TestBuildEmbed:
    def test_bug_report(self):
        now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        client = ClientContext(
            user_agent=CHROME_WINDOWS,
            remote_ip="203.0.113.7",
            country="IN",
            colo="BOM",
            ray="8a1b2c3d",
        )

        embed = build_embed(_submission(contact_email="dev@example.org"), client, now)

        assert embed["title"] == "🐛 Bug Report"
        assert embed["color"] == 0xFF0000
        assert embed["description"] == (
            "**Answer cut off**\n\nThe reply stopped mid-sentence."
        )
        assert embed["timestamp"] == "2024-05-01T12:00:00+00:00"
        names = [f["name"] for f in embed["fields"]]
        assert names == ["💻 Environment", "🌍 Network & Location", "📧 Contact"]
        assert embed["fields"][0]["value"] == "**Chrome** on **Windows** (Desktop)"
        assert embed["fields"][1]["value"] == (
            "**Country:** IN\n**Data Center:** BOM\n**CF Ray:** 8a1b2c3d\n"
            "**IP:** 203.0.113.7"
        )

    def test_improvement_without_network(self):
        embed = build_embed(_submission(type="improvement"), ClientContext())

        assert embed["title"] == "✨ Improvement Suggestion"
        assert embed["color"] == 0x0099FF
        assert [f["name"] for f in embed["fields"]] == ["💻 Environment"]


class TestDiscordWebhookNotifier:
    def _notifier(self, handler, **config) -> DiscordWebhookNotifier:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        values = {"discord_webhook_url": WEBHOOK}
        values.update(config)
        return DiscordWebhookNotifier(client, FeedbackConfig(**values))

    @pytest.mark.asyncio
    async def test_json_without_image(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(204)

        await self._notifier(handler).send(_submission(), ClientContext())

        request = seen[0]
        assert str(request.url) == WEBHOOK
        assert request.headers["content-type"] == "application/json"
        body = json.loads(request.content)
        assert body["username"] == "InoBot Feedback"
        assert body["embeds"][0]["title"] == "🐛 Bug Report"
        assert "image" not in body["embeds"][0]

    @pytest.mark.asyncio
    async def test_multipart_with_image(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        await self._notifier(handler).send(
            _submission(image=_png()), ClientContext()
        )

        request = seen[0]
        assert request.headers["content-type"].startswith("multipart/form-data")
        content = request.read()
        assert b'name="payload_json"' in content
        assert b"attachment://shot.png" in content
        assert b'filename="shot.png"' in content

    @pytest.mark.asyncio
    async def test_missing_webhook(self):
        notifier = self._notifier(lambda r: httpx.Response(204), discord_webhook_url="")

        with pytest.raises(ConfigurationError):
            await notifier.send(_submission(), ClientContext())

    @pytest.mark.asyncio
    async def test_rejected_delivery(self):
        notifier = self._notifier(lambda r: httpx.Response(400, json={"code": 50006}))

        with pytest.raises(NotificationError, match="Failed to send feedback"):
            await notifier.send(_submission(), ClientContext())


class TestTurnstileVerifier:
    def _verifier(self, handler, secret="s3cret") -> TurnstileVerifier:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return TurnstileVerifier(client, FeedbackConfig(turnstile_secret_key=secret))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token, secret", [(None, "s3cret"), ("tok", "")])
    async def test_skipped(self, token, secret):
        def handler(request):
            raise AssertionError("no request expected")

        outcome = await self._verifier(handler, secret).verify(token, "1.2.3.4")

        assert outcome.status == "skipped"

    @pytest.mark.asyncio
    async def test_passed(self):
        seen: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(parse_qs(request.content.decode()))
            return httpx.Response(200, json={"success": True})

        outcome = await self._verifier(handler).verify("tok", "1.2.3.4")

        assert outcome.passed
        assert seen[0] == {
            "secret": ["s3cret"],
            "response": ["tok"],
            "remoteip": ["1.2.3.4"],
        }

    @pytest.mark.asyncio
    async def test_failed(self):
        def handler(request):
            return httpx.Response(
                200,
                json={"success": False, "error-codes": ["invalid-input-response"]},
            )

        outcome = await self._verifier(handler).verify("tok", None)

        assert outcome.status == "failed"
        assert outcome.error_codes == ["invalid-input-response"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [["success"], "ok", 1])
    async def test_non_object_body(self, body):
        def handler(request):
            return httpx.Response(200, json=body)

        outcome = await self._verifier(handler).verify("tok", None)

        assert outcome.status == "error"

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        outcome = await self._verifier(handler).verify("tok", None)

        assert outcome.status == "error"


class TestFeedbackService:
    def _service(self, status: str, enforce: bool):
        verifier = MagicMock()
        verifier.verify = AsyncMock(return_value=CaptchaOutcome(status=status))
        notifier = MagicMock()
        notifier.send = AsyncMock()
        service = FeedbackService(
            verifier, notifier, FeedbackConfig(enforce_captcha=enforce)
        )
        return service, notifier

    @pytest.mark.asyncio
    async def test_failed_captcha_enforced(self):
        service, notifier = self._service("failed", enforce=True)

        with pytest.raises(InputValidationError, match="Captcha verification failed"):
            await service.submit(_submission(), ClientContext(), "tok")

        notifier.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failed_captcha_tolerated(self):
        service, notifier = self._service("failed", enforce=False)

        outcome = await service.submit(_submission(), ClientContext(), "tok")

        assert outcome.status == "failed"
        notifier.send.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_skipped_captcha_delivers_even_when_enforced(self):
        service, notifier = self._service("skipped", enforce=True)

        await service.submit(_submission(), ClientContext())

        notifier.send.assert_awaited_once()
