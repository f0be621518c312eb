"""Cloudflare Turnstile verification.

Missing token or secret skips verification.  Transport failures are
reported as ``CaptchaOutcome(status="error")`` rather than raised.
"""

from __future__ import annotations

import logging

import httpx

from inobot.configs.system import FeedbackConfig

from .models import (
    CAPTCHA_ERROR,
    CAPTCHA_FAILED,
    CAPTCHA_PASSED,
    CAPTCHA_SKIPPED,
    CaptchaOutcome,
)

logger = logging.getLogger(__name__)


class TurnstileVerifier:
    def __init__(self, client: httpx.AsyncClient, config: FeedbackConfig) -> None:
        self._client = client
        self._config = config

    async def verify(self, token: str | None, remote_ip: str | None) -> CaptchaOutcome:
        if not token or not self._config.turnstile_secret_key:
            return CaptchaOutcome(status=CAPTCHA_SKIPPED)

        try:
            response = await self._client.post(
                self._config.turnstile_verify_url,
                data={
                    "secret": self._config.turnstile_secret_key,
                    "response": token,
                    "remoteip": remote_ip or "unknown",
                },
            )
            response.raise_for_status()
            result = response.json()
        except (httpx.HTTPError, ValueError):
            logger.warning("Turnstile verification request failed", exc_info=True)
            return CaptchaOutcome(status=CAPTCHA_ERROR)

        if not isinstance(result, dict):
            logger.warning("Turnstile returned an unexpected body: %r", result)
            return CaptchaOutcome(status=CAPTCHA_ERROR)

        if result.get("success"):
            return CaptchaOutcome(status=CAPTCHA_PASSED)

        codes = list(result.get("error-codes") or [])
        logger.warning("Turnstile verification failed: %s", codes)
        return CaptchaOutcome(status=CAPTCHA_FAILED, error_codes=codes)
