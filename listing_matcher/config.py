"""Configuration management using pydantic-settings."""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Dict, Literal
import logging
import sys
import structlog


TieBreak = Literal["first", "longest"]


class MatchingSettings(BaseSettings):
    """Matching run configuration loaded from environment variables.

    All settings prefixed with MATCH_ (e.g., MATCH_TIE_BREAK=first)
    """

    # Resolution Rules
    tie_break: TieBreak = Field(
        default="longest",
        description=(
            "How to choose between several manufacturers or families found in "
            "one listing: 'first' keeps the first catalog hit, 'longest' the longest"
        )
    )
    extra_aliases: Dict[str, str] = Field(
        default_factory=dict,
        description="Additional manufacturer alias -> canonical manufacturer pairs (JSON)"
    )

    # Output Configuration
    output_path: str = Field(
        default="results.txt",
        description="Default file the CLI writes grouped results to"
    )

    # Logging Configuration
    log_level: str = "INFO"
    log_json: bool = Field(
        default=False,
        description="Render log events as JSON instead of console output"
    )

    model_config = SettingsConfigDict(
        env_prefix="MATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
matching_settings = MatchingSettings()


def configure_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """Configure stdlib logging and the structlog processor chain."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level,
    )
    logging.getLogger().setLevel(level)

    shared_processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_logs:
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=False),
        ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
