"""User feedback -- validation, Turnstile captcha and Discord delivery."""

from .deps import build_feedback, get_feedback_service
from .discord import DiscordWebhookNotifier, build_embed
from .models import (
    CaptchaOutcome,
    ClientContext,
    FeedbackImage,
    FeedbackSubmission,
)
from .service import SUCCESS_MESSAGE, FeedbackService
from .turnstile import TurnstileVerifier
from .validation import parse_user_agent, validate_submission

__all__ = [
    "SUCCESS_MESSAGE",
    "CaptchaOutcome",
    "ClientContext",
    "DiscordWebhookNotifier",
    "FeedbackImage",
    "FeedbackService",
    "FeedbackSubmission",
    "TurnstileVerifier",
    "build_embed",
    "build_feedback",
    "get_feedback_service",
    "parse_user_agent",
    "validate_submission",
]
