"""Centralized logging configuration.

All entry points should call configure_logging() early.

Logging Levels:
- DEBUG: Frame traffic, handler registration
- INFO: Connection lifecycle, registration, queued generations
- WARNING: Missing API key, dropped notifications, unmatched responses
- ERROR: Connection errors, failed registration, failed handlers

Messages are short snake_case event names; context goes in ``extra`` and is
rendered as ``key=value`` pairs after the message.
"""

import logging
import os
import re
from dataclasses import dataclass, field

# Default patterns for secret detection and redaction
DEFAULT_REDACT_PATTERNS: list[str] = [
    # OpenAI API keys
    r"\b(sk-[A-Za-z0-9_-]{20,})\b",
    # ENV-style assignments: API_KEY=secret or MODULE_TOKEN: secret
    r"\b[A-Z0-9_]+(?:KEY|TOKEN|SECRET|PASSWORD|PASSWD)\s*[=:]\s*([^\s\"']{8,})",
    # JSON fields carrying credentials: "token": "secret", "apiKey": "secret"
    r"[\"'](?:token|apiKey|api_key)[\"']\s*:\s*[\"']([^\"']{8,})[\"']",
    # Bearer tokens in headers
    r"\bBearer\s+([A-Za-z0-9._\-+=]{20,})\b",
]

# Attributes every LogRecord has; anything else came from ``extra``
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime", "component"}


@dataclass
class SecretRedactor:
    """Redacts sensitive information from log messages.

    Patterns match common secret formats (API keys, tokens, passwords)
    and replace them with partially masked versions for debuggability.
    """

    patterns: list[re.Pattern[str]] = field(default_factory=list)
    enabled: bool = True

    def __post_init__(self) -> None:
        if not self.patterns:
            self.patterns = [
                re.compile(p, re.IGNORECASE) for p in DEFAULT_REDACT_PATTERNS
            ]

    def redact(self, text: str) -> str:
        """Redact secrets from text, preserving partial info for debugging."""
        if not self.enabled or not text:
            return text
        result = text
        for pattern in self.patterns:
            result = pattern.sub(self._mask_match, result)
        return result

    def _mask_match(self, match: re.Match[str]) -> str:
        """Mask a matched secret, preserving start/end for identification."""
        full = match.group(0)

        # Get the captured group (the actual secret value)
        token = match.group(1) if match.lastindex else full

        # Skip if already redacted
        if "..." in token:
            return full

        # For short tokens, fully mask
        if len(token) < 12:
            return full.replace(token, "***") if token != full else "***"

        # For longer tokens, show first 4 and last 4 chars
        masked = f"{token[:4]}...{token[-4:]}"
        return full.replace(token, masked) if token != full else masked


# Module-level redactor instance
_redactor = SecretRedactor()


def format_extra(record: logging.LogRecord) -> str:
    """Render the ``extra`` fields of a record as ``key=value`` pairs."""
    pairs = [
        f"{key}={value}"
        for key, value in record.__dict__.items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    ]
    return " ".join(pairs)


class ComponentFormatter(logging.Formatter):
    """Formatter that extracts component name from logger path.

    Converts full module paths to short component names:
    - evntboard_openai.rpc.session -> rpc
    - evntboard_openai.hub -> hub

    Extra fields are appended and the whole line is passed through the
    secret redactor.
    """

    def format(self, record: logging.LogRecord) -> str:
        parts = record.name.split(".")
        if len(parts) >= 2 and parts[0] == "evntboard_openai":
            record.component = parts[1]
        else:
            record.component = parts[0]
        text = super().format(record)
        extra = format_extra(record)
        if extra:
            first, newline, rest = text.partition("\n")
            text = f"{first} {extra}{newline}{rest}"
        return _redactor.redact(text)


# Third-party loggers that are too noisy at INFO level
NOISY_LOGGERS = [
    "httpx",  # HTTP client used by OpenAI
    "httpcore",  # httpx dependency
    "openai",  # OpenAI SDK
    "websockets",  # Frame-level client logging
]


def resolve_level(level: str | None = None) -> str:
    """Resolve a log level name, falling back to LOG_LEVEL then INFO."""
    if level is None:
        level = os.environ.get("LOG_LEVEL", "INFO")
    level = level.upper()
    if level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
        level = "INFO"
    return level


def configure_logging(
    level: str | None = None,
    use_rich: bool = False,
) -> None:
    """Configure logging.

    Call this once at application startup.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
            If None, uses LOG_LEVEL env var or INFO.
        use_rich: Use Rich handler for colorful output.
    """
    log_level = getattr(logging, resolve_level(level))

    console_handler: logging.Handler
    if use_rich:
        from rich.logging import RichHandler

        console_handler = RichHandler(
            rich_tracebacks=False,
            show_path=False,
            show_time=True,
            markup=False,
        )
        console_handler.setFormatter(ComponentFormatter("%(component)s | %(message)s"))
    else:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(
            ComponentFormatter(
                "%(asctime)s | %(levelname)-8s | %(component)s | %(message)s",
                datefmt="%H:%M:%S",
            )
        )

    logging.basicConfig(
        level=log_level,
        handlers=[console_handler],
        force=True,
    )

    # Suppress noisy third-party loggers
    for logger_name in NOISY_LOGGERS:
        lib_logger = logging.getLogger(logger_name)
        lib_logger.setLevel(logging.WARNING)
