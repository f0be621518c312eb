"""Feedback submission: captcha check, then delivery."""

from __future__ import annotations

import logging

from inobot.configs.system import FeedbackConfig
from inobot.core.errors import InputValidationError

from .discord import DiscordWebhookNotifier
from .models import CAPTCHA_SKIPPED, CaptchaOutcome, ClientContext, FeedbackSubmission
from .turnstile import TurnstileVerifier

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Feedback submitted successfully"


class FeedbackService:
    def __init__(
        self,
        verifier: TurnstileVerifier,
        notifier: DiscordWebhookNotifier,
        config: FeedbackConfig,
    ) -> None:
        self._verifier = verifier
        self._notifier = notifier
        self._config = config

    async def submit(
        self,
        submission: FeedbackSubmission,
        client: ClientContext,
        captcha_token: str | None = None,
    ) -> CaptchaOutcome:
        """Verify the captcha and deliver *submission*.

        A failed captcha only rejects the submission when
        ``feedback.enforce_captcha`` is set; otherwise it is logged.
        """
        outcome = await self._verifier.verify(captcha_token, client.remote_ip)
        if outcome.status != CAPTCHA_SKIPPED and not outcome.passed:
            if self._config.enforce_captcha:
                raise InputValidationError("Captcha verification failed")
            logger.info("Accepting feedback despite captcha %s", outcome.status)

        await self._notifier.send(submission, client)
        logger.info("Feedback delivered (type=%s)", submission.type)
        return outcome
