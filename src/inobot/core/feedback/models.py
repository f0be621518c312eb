"""Feedback form value objects."""

from dataclasses import dataclass, field

FEEDBACK_TYPE_BUG = "bug"
FEEDBACK_TYPE_IMPROVEMENT = "improvement"

VALID_FEEDBACK_TYPES = frozenset({FEEDBACK_TYPE_BUG, FEEDBACK_TYPE_IMPROVEMENT})

# Captcha outcome statuses
CAPTCHA_PASSED = "passed"
CAPTCHA_FAILED = "failed"
CAPTCHA_SKIPPED = "skipped"
CAPTCHA_ERROR = "error"


@dataclass(frozen=True)
class FeedbackImage:
    filename: str
    content_type: str
    data: bytes


@dataclass(frozen=True)
class FeedbackSubmission:
    """A validated feedback form."""

    type: str
    subject: str
    description: str
    contact_email: str | None = None
    image: FeedbackImage | None = None


@dataclass(frozen=True)
class ClientContext:
    """Who sent the feedback, as far as request headers tell."""

    user_agent: str = "Unknown"
    remote_ip: str | None = None
    country: str | None = None
    colo: str | None = None
    ray: str | None = None


@dataclass(frozen=True)
class ClientInfo:
    browser: str
    os: str
    device: str


@dataclass
class CaptchaOutcome:
    """Result of one Turnstile verification."""

    status: str
    error_codes: list[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.status == CAPTCHA_PASSED
