"""API client for the InoBot ask endpoint."""

import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from .config import CLIConfig

logger = logging.getLogger(__name__)


class AskAPIError(Exception):
    """The ask endpoint answered with an error body or was unreachable."""

    def __init__(self, message: str, code: str = "UNKNOWN") -> None:
        super().__init__(message)
        self.code = code


class AskAPIClient:
    """Client for the ``/ask`` endpoint.

    The server is stateless: the conversation history lives here and is
    sent whole with every question.
    """

    def __init__(
        self, config: CLIConfig, client: httpx.AsyncClient | None = None
    ) -> None:
        self.config = config
        self.client = client or httpx.AsyncClient(timeout=config.timeout)
        self.history: list[dict[str, str]] = []

    async def ask(self, question: str) -> dict[str, Any]:
        """Send *question* with the current history and record the exchange.

        Raises
        ------
        AskAPIError
            On transport errors or a non-200 response.
        """
        payload = {
            "question": question,
            "conversationHistory": self.recent_history(),
        }
        logger.debug(
            "POST %s (%d history messages)", self.config.ask_url, len(self.history)
        )

        try:
            response = await self.client.post(self.config.ask_url, json=payload)
        except httpx.TimeoutException as exc:
            raise AskAPIError("Request timed out.", "TIMEOUT") from exc
        except httpx.HTTPError as exc:
            raise AskAPIError(f"Connection error: {exc}", "CONNECTION_ERROR") from exc

        logger.debug("Response status: %s", response.status_code)
        if response.status_code != 200:
            raise AskAPIError(*_error_of(response))

        body = response.json()
        self._remember("user", question)
        self._remember("assistant", body.get("answer", ""))
        return body

    def recent_history(self) -> list[dict[str, str]]:
        """The trailing ``max_history`` messages; none when it is 0."""
        if self.config.max_history <= 0:
            return []
        return self.history[-self.config.max_history :]

    def reset(self) -> None:
        self.history.clear()

    def _remember(self, role: str, content: str) -> None:
        self.history.append(
            {
                "role": role,
                "content": content,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()


def _error_of(response: httpx.Response) -> tuple[str, str]:
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}: {response.text}", "HTTP_ERROR"
    if not isinstance(body, dict):
        return f"HTTP {response.status_code}", "HTTP_ERROR"
    return (
        str(body.get("detail", f"HTTP {response.status_code}")),
        str(body.get("code", "HTTP_ERROR")),
    )
