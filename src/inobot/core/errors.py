"""Exception taxonomy shared by the service and API layers.

``api.exceptions`` maps each class to an HTTP status; the service layer
only raises.
"""


class InoBotError(Exception):
    """Base class for every error the API layer knows how to render."""


class InputValidationError(InoBotError):
    """Malformed or missing caller input.  Rejected before any external call."""


class UpstreamError(InoBotError):
    """An embedding, LLM, vector-store or storage call failed."""


class EmptyEmbeddingError(UpstreamError):
    """The embedding provider returned no vector (or an empty one)."""


class ConfigurationError(InoBotError):
    """A required secret or endpoint is not configured."""


class NotificationError(InoBotError):
    """The feedback notification sink rejected or failed the delivery."""


class RequestTimeoutError(InoBotError):
    """The ask pipeline did not finish within ``api.request_timeout``."""
