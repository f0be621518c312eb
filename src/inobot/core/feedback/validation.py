"""Feedback form validation and user-agent parsing.

Validation runs before any outbound call; every failure is an
``InputValidationError`` with a caller-facing message.
"""

from __future__ import annotations

import re

from inobot.configs.system import FeedbackConfig
from inobot.core.errors import InputValidationError

from .models import (
    VALID_FEEDBACK_TYPES,
    ClientInfo,
    FeedbackImage,
    FeedbackSubmission,
)

MAX_SUBJECT_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 2000
MAX_CONTACT_LENGTH = 100

IMAGE_MIME_PREFIX = "image/"
UNKNOWN = "Unknown"

_BROWSERS = (
    ("Chrome", re.compile(r"Chrome/[\d.]+")),
    ("Firefox", re.compile(r"Firefox/[\d.]+")),
    ("Safari", re.compile(r"Safari/[\d.]+")),
    ("Edge", re.compile(r"Edge/[\d.]+")),
    ("Opera", re.compile(r"Opera/[\d.]+")),
)

# Mobile systems first: Android UAs also say "Linux", iOS ones "Mac OS X".
_SYSTEMS = (
    ("Windows", re.compile(r"Windows"), "Desktop"),
    ("Android", re.compile(r"Android"), "Mobile"),
    ("iOS", re.compile(r"iPhone|iPad"), "Mobile"),
    ("macOS", re.compile(r"Mac OS X"), "Desktop"),
    ("Linux", re.compile(r"Linux"), "Desktop"),
)


def _required(value: str | None, max_length: int, field_name: str) -> str:
    trimmed = (value or "").strip()
    if not trimmed:
        raise InputValidationError(f"{field_name} is required")
    if len(trimmed) > max_length:
        raise InputValidationError(
            f"{field_name} must be {max_length} characters or less"
        )
    return trimmed


def validate_image(
    image: FeedbackImage | None, config: FeedbackConfig
) -> FeedbackImage | None:
    if image is None or not image.data:
        return None
    if len(image.data) > config.max_image_bytes:
        limit_mb = config.max_image_bytes // (1024 * 1024)
        raise InputValidationError(f"Image size must be less than {limit_mb}MB")
    if not (image.content_type or "").startswith(IMAGE_MIME_PREFIX):
        raise InputValidationError("File must be an image")
    return image


def validate_submission(
    feedback_type: str | None,
    subject: str | None,
    description: str | None,
    contact_email: str | None,
    image: FeedbackImage | None,
    config: FeedbackConfig,
) -> FeedbackSubmission:
    """Validate raw form fields into a ``FeedbackSubmission``."""
    if feedback_type not in VALID_FEEDBACK_TYPES:
        raise InputValidationError("Invalid feedback type")

    subject = _required(subject, MAX_SUBJECT_LENGTH, "Subject")
    description = _required(description, MAX_DESCRIPTION_LENGTH, "Description")
    image = validate_image(image, config)

    contact = (contact_email or "").strip() or None
    if contact is not None and len(contact) > MAX_CONTACT_LENGTH:
        raise InputValidationError(
            f"Contact info must be {MAX_CONTACT_LENGTH} characters or less"
        )

    return FeedbackSubmission(
        type=feedback_type,
        subject=subject,
        description=description,
        contact_email=contact,
        image=image,
    )


def parse_user_agent(user_agent: str) -> ClientInfo:
    """Best-effort browser / OS / device guess from a User-Agent string."""
    browser = next(
        (name for name, pattern in _BROWSERS if pattern.search(user_agent)),
        UNKNOWN,
    )
    system = next(
        (
            (name, device)
            for name, pattern, device in _SYSTEMS
            if pattern.search(user_agent)
        ),
        None,
    )
    os_name = system[0] if system else UNKNOWN
    if "iPad" in user_agent:
        device = "Tablet"
    else:
        device = system[1] if system else "Desktop"
    return ClientInfo(browser=browser, os=os_name, device=device)
