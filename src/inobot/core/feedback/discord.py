"""Discord webhook delivery for feedback submissions."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from inobot.configs.system import FeedbackConfig
from inobot.core.errors import ConfigurationError, NotificationError

from .models import (
    FEEDBACK_TYPE_BUG,
    ClientContext,
    FeedbackSubmission,
)
from .validation import UNKNOWN, parse_user_agent

logger = logging.getLogger(__name__)

FOOTER_TEXT = "InoBot Feedback System"

_TITLES = {
    FEEDBACK_TYPE_BUG: "🐛 Bug Report",
}
_DEFAULT_TITLE = "✨ Improvement Suggestion"

_COLORS = {
    FEEDBACK_TYPE_BUG: 0xFF0000,
}
_DEFAULT_COLOR = 0x0099FF


def network_info(client: ClientContext) -> list[str]:
    """Cloudflare location headers and the client IP as embed lines."""
    lines = [
        f"**{label}:** {value}"
        for label, value in (
            ("Country", client.country),
            ("Data Center", client.colo),
            ("CF Ray", client.ray),
        )
        if value and value != UNKNOWN
    ]
    if client.remote_ip:
        lines.append(f"**IP:** {client.remote_ip}")
    return lines


def build_embed(
    submission: FeedbackSubmission,
    client: ClientContext,
    now: datetime | None = None,
) -> dict[str, Any]:
    info = parse_user_agent(client.user_agent or UNKNOWN)
    fields: list[dict[str, Any]] = [
        {
            "name": "💻 Environment",
            "value": f"**{info.browser}** on **{info.os}** ({info.device})",
            "inline": False,
        }
    ]

    network = network_info(client)
    if network:
        fields.append(
            {
                "name": "🌍 Network & Location",
                "value": "\n".join(network),
                "inline": False,
            }
        )
    if submission.contact_email:
        fields.append(
            {"name": "📧 Contact", "value": submission.contact_email, "inline": False}
        )

    return {
        "title": _TITLES.get(submission.type, _DEFAULT_TITLE),
        "description": f"**{submission.subject}**\n\n{submission.description}",
        "color": _COLORS.get(submission.type, _DEFAULT_COLOR),
        "fields": fields,
        "footer": {"text": FOOTER_TEXT},
        "timestamp": (now or datetime.now(timezone.utc)).isoformat(),
    }


class DiscordWebhookNotifier:
    """Posts one embed per submission, attaching the optional screenshot."""

    def __init__(self, client: httpx.AsyncClient, config: FeedbackConfig) -> None:
        self._client = client
        self._config = config

    def payload(
        self, submission: FeedbackSubmission, client: ClientContext
    ) -> dict[str, Any]:
        embed = build_embed(submission, client)
        if submission.image is not None:
            embed["image"] = {"url": f"attachment://{submission.image.filename}"}
        return {
            "embeds": [embed],
            "username": self._config.username,
            "avatar_url": self._config.avatar_url,
        }

    async def send(
        self, submission: FeedbackSubmission, client: ClientContext
    ) -> None:
        url = self._config.discord_webhook_url
        if not url:
            logger.error("Discord webhook URL not configured")
            raise ConfigurationError("Feedback service not configured")

        payload = self.payload(submission, client)
        try:
            if submission.image is None:
                response = await self._client.post(url, json=payload)
            else:
                image = submission.image
                response = await self._client.post(
                    url,
                    data={"payload_json": json.dumps(payload)},
                    files={"file": (image.filename, image.data, image.content_type)},
                )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Discord webhook failed: %s", exc)
            raise NotificationError("Failed to send feedback") from exc
