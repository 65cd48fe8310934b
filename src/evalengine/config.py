"""
Runtime settings for the eval-engine runner and CLI.

Settings are loaded from ``EVALENGINE_*`` environment variables with
Pydantic Settings; CLI flags are applied on top with ``with_overrides``.
"""

from typing import Annotated, Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_TEST_FILE_PATTERNS = ("**/*_eval.py", "**/eval_*.py")

DEFAULT_IGNORE_DIRS = (
    ".git",
    ".venv",
    "venv",
    "node_modules",
    "site-packages",
    "__pycache__",
    "build",
    "dist",
)


class EngineSettings(BaseSettings):
    """
    Settings for discovery, probing, and logging.

    Precedence is CLI flags, then environment variables, then these
    defaults. List settings are comma-separated in the environment:

        EVALENGINE_TEST_FILE_PATTERNS="evals/*.py,checks/*_eval.py"
    """

    model_config = SettingsConfigDict(
        env_prefix="EVALENGINE_",
        case_sensitive=False,
        frozen=True,
    )

    # Probing
    default_probe_input: str = Field(
        default="Test input",
        description="Input used for handles with no declared test cases",
    )

    # Stored for reporting; not enforced by the engine
    timeout_ms: int = Field(default=30000, ge=0, description="Test timeout in milliseconds")

    # Discovery
    test_file_patterns: Annotated[tuple[str, ...], NoDecode] = DEFAULT_TEST_FILE_PATTERNS
    ignore_dirs: Annotated[tuple[str, ...], NoDecode] = DEFAULT_IGNORE_DIRS

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    log_format: Literal["text", "json"] = "text"

    @field_validator("test_file_patterns", "ignore_dirs", mode="before")
    @classmethod
    def _split_comma_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            return tuple(part.strip() for part in value.split(",") if part.strip())
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    @field_validator("log_format", mode="before")
    @classmethod
    def _lower(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value

    def with_overrides(self, **kwargs: Any) -> "EngineSettings":
        """
        Return a validated copy with non-None overrides applied.

        Raises:
            pydantic.ValidationError: If an override is invalid
        """
        updates = {k: v for k, v in kwargs.items() if v is not None}
        return type(self)(**{**self.model_dump(), **updates})
