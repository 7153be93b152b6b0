"""Application configuration loaded from environment variables.

Settings for the API surface, the advisory LLM call, free-text extraction,
and the interview result gate. Uses pydantic-settings for validation and
.env file support.
"""

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_KNOWN_LLM_PROVIDERS = ("claude", "openai")

# Upper bound for sampling temperature accepted by both providers
_MAX_TEMPERATURE = 2.0


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # API
    # 0.0.0.0 binds to all network interfaces (required for Docker containers)
    api_host: str = "0.0.0.0"  # nosec B104
    api_port: int = 8000

    # CORS (Security)
    # Default allows localhost:3000 for the chat widget during development
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    log_json: bool = False

    # LLM Providers
    llm_provider: str = "claude"
    anthropic_api_key: str = ""
    openai_api_key: str = ""

    # Advisory call (phrasing of assistant messages)
    advisory_enabled: bool = True
    advisory_timeout_seconds: float = 20.0
    advisory_temperature: float = 0.2
    advisory_max_tokens: int = 2000
    repair_temperature: float = 0.1

    # Free-text extraction
    extraction_timeout_seconds: float = 10.0
    extraction_temperature: float = 0.1
    extraction_max_tokens: int = 500
    extraction_min_confidence: float = 0.6

    # Interview result gate
    result_confidence_threshold: float = 0.8

    # Rate Limiting (Security)
    # Format: "count/period" (e.g., "10/minute", "100/hour")
    rate_limit_llm: str = "20/minute"  # /career-assistant/turn
    rate_limit_enabled: bool = True  # Disable for testing

    @model_validator(mode="after")
    def check_settings(self) -> "Settings":
        """Validate cross-field configuration invariants.

        Checks:
        - LLM provider is one of the supported adapters
        - Confidence thresholds lie in [0, 1]
        - Temperatures lie in [0, 2]
        - Timeouts and token budgets are positive
        - CORS must not use wildcard origin
        """
        if self.llm_provider not in _KNOWN_LLM_PROVIDERS:
            msg = (
                f"LLM_PROVIDER must be one of {', '.join(_KNOWN_LLM_PROVIDERS)}. "
                f"Got: {self.llm_provider}"
            )
            raise ValueError(msg)

        for env_name, value in (
            ("EXTRACTION_MIN_CONFIDENCE", self.extraction_min_confidence),
            ("RESULT_CONFIDENCE_THRESHOLD", self.result_confidence_threshold),
        ):
            if not 0.0 <= value <= 1.0:
                msg = f"{env_name} must be between 0 and 1. Got: {value}"
                raise ValueError(msg)

        for env_name, value in (
            ("ADVISORY_TEMPERATURE", self.advisory_temperature),
            ("REPAIR_TEMPERATURE", self.repair_temperature),
            ("EXTRACTION_TEMPERATURE", self.extraction_temperature),
        ):
            if not 0.0 <= value <= _MAX_TEMPERATURE:
                msg = (
                    f"{env_name} must be between 0 and {_MAX_TEMPERATURE}. "
                    f"Got: {value}"
                )
                raise ValueError(msg)

        for env_name, value in (
            ("ADVISORY_TIMEOUT_SECONDS", self.advisory_timeout_seconds),
            ("EXTRACTION_TIMEOUT_SECONDS", self.extraction_timeout_seconds),
            ("ADVISORY_MAX_TOKENS", self.advisory_max_tokens),
            ("EXTRACTION_MAX_TOKENS", self.extraction_max_tokens),
        ):
            if value <= 0:
                msg = f"{env_name} must be positive. Got: {value}"
                raise ValueError(msg)

        if "*" in self.allowed_origins:
            msg = (
                "ALLOWED_ORIGINS must not contain '*' (wildcard). "
                "List the chat widget origins explicitly."
            )
            raise ValueError(msg)

        return self


settings = Settings()
