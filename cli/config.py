"""Configuration management for the CLI tool."""

from pydantic import BaseModel, Field


class CLIConfig(BaseModel):
    """CLI configuration settings."""

    host: str = Field(
        default="localhost",
        description="Server host",
    )
    port: int = Field(
        default=8080,
        description="Server port",
    )
    api_path: str = Field(
        default="/api/v1/ask",
        description="API path for the ask endpoint",
    )
    timeout: float = Field(
        default=120.0,
        description="Per-request timeout in seconds",
    )
    max_history: int = Field(
        default=20,
        ge=0,
        description="Most recent messages sent back with each question",
    )

    @property
    def base_url(self) -> str:
        """Get the base URL for the API."""
        return f"http://{self.host}:{self.port}"

    @property
    def ask_url(self) -> str:
        """Get the full URL for the ask endpoint."""
        return f"{self.base_url}{self.api_path}"
