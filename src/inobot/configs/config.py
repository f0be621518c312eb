"""Configuration management using pydantic-settings.

**Not a singleton**: each call to ``get_app_config()`` re-reads config
from disk so that edits to the YAML files are picked up without a
restart.

Priority order (highest first):

1. Environment variables (``INOBOT_`` prefix, ``__`` for nesting)
2. ``.env`` dotenv file
3. Static YAML (``configs/config.yaml``)
4. Prompt YAML (``configs/prompt.yml``, ``prompt`` section only)
5. Init defaults / field defaults
6. File secrets
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from .prompt import PromptConfig
from .system import (
    APIConfig,
    EmbeddingConfig,
    FeedbackConfig,
    IngestionConfig,
    LiveDataConfig,
    LLMConfig,
    LoggingConfig,
    MemoryConfig,
    RagConfig,
    StorageConfig,
    ThirdPartyConfig,
    TracingConfig,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Path constants
# ---------------------------------------------------------------------------

CONFIG_PY_PATH = Path(__file__).resolve()
PROJECT_ROOT = CONFIG_PY_PATH.parent.parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "configs"

STATIC_CONFIG_FILE = CONFIG_DIR / "config.yaml"
PROMPT_CONFIG_FILE = CONFIG_DIR / "prompt.yml"

DOTENV_FILE_PATH = PROJECT_ROOT / ".env"
ENV_DELIMITER = "__"
ENV_PREFIX = "INOBOT_"

DEFAULT_ENCODING = "utf-8"


class AppConfig(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(
        env_file=DOTENV_FILE_PATH,
        env_file_encoding=DEFAULT_ENCODING,
        env_nested_delimiter=ENV_DELIMITER,
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        extra="ignore",
        yaml_file=STATIC_CONFIG_FILE,
        yaml_file_encoding=DEFAULT_ENCODING,
    )

    third_party: ThirdPartyConfig = Field(
        default_factory=ThirdPartyConfig,
        description="Third-party service configurations",
    )
    api: APIConfig = Field(
        default_factory=APIConfig, description="API configuration settings"
    )
    llm: LLMConfig = Field(
        default_factory=LLMConfig, description="Chat model configuration"
    )
    embedding: EmbeddingConfig = Field(
        default_factory=EmbeddingConfig,
        description="OpenAI-compatible embedding endpoint settings",
    )
    rag: RagConfig = Field(
        default_factory=RagConfig, description="Retrieval and guardrail settings"
    )
    live_data: LiveDataConfig = Field(
        default_factory=LiveDataConfig, description="Live-data trigger settings"
    )
    memory: MemoryConfig = Field(
        default_factory=MemoryConfig, description="Conversation memory settings"
    )
    ingestion: IngestionConfig = Field(
        default_factory=IngestionConfig, description="Upload chunking settings"
    )
    storage: StorageConfig = Field(
        default_factory=StorageConfig, description="Blob storage settings"
    )
    feedback: FeedbackConfig = Field(
        default_factory=FeedbackConfig, description="Feedback delivery settings"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging settings"
    )
    tracing: TracingConfig = Field(
        default_factory=TracingConfig, description="OpenTelemetry settings"
    )
    prompt: PromptConfig = Field(
        default_factory=PromptConfig, description="Prompt wording"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            _PromptYamlSettingsSource(settings_cls),
            init_settings,
            file_secret_settings,
        )


class _PromptYamlSettingsSource(PydanticBaseSettingsSource):
    """Custom settings source that loads the ``prompt.yml`` file."""

    def __init__(self, settings_cls: type[BaseSettings]) -> None:
        super().__init__(settings_cls)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        if not PROMPT_CONFIG_FILE.exists():
            return {}

        try:
            with open(PROMPT_CONFIG_FILE, encoding=DEFAULT_ENCODING) as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError):
            logger.warning("Failed to read %s", PROMPT_CONFIG_FILE, exc_info=True)
            return {}

        if not isinstance(data, dict):
            return {}
        return {"prompt": data}


def get_app_config() -> AppConfig:
    """Get the application configuration (re-read on every call)."""
    return AppConfig()
