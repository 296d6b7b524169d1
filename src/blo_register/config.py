"""
Centralized configuration management.

Configuration is loaded from:
1. Environment variables
2. .env file (if present)
3. Default values

Usage:
    from blo_register.config import get_config
    config = get_config()
    print(config.data_dir)  # where households/voters/settings JSON live
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


def _load_dotenv(dotenv_path: Optional[Path] = None) -> None:
    """
    Minimal .env loader (no external dependency).

    Supports KEY=VALUE, ignores blank lines and comments (#).
    Does not override existing environment variables.
    """
    if dotenv_path is None:
        dotenv_path = Path(__file__).resolve().parents[2] / ".env"

    if not dotenv_path.exists() or not dotenv_path.is_file():
        return

    for raw_line in dotenv_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if not key:
            continue
        # Only set if not already in environment
        if os.getenv(key) in (None, ""):
            os.environ[key] = value


# Load .env on module import
_load_dotenv()


def _get_bool_env(key: str, default: bool = False) -> bool:
    """Get boolean from environment variable."""
    value = os.getenv(key, "").strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    return default


def _get_int_env(key: str, default: int) -> int:
    """Get integer from environment variable."""
    value = os.getenv(key, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass
class AssistantConfig:
    """Chat assistant (LLM) configuration."""
    provider: str = field(default_factory=lambda: os.getenv("AI_PROVIDER", "Gemini"))
    api_key: str = field(default_factory=lambda: os.getenv("AI_API_KEY", ""))
    model: str = field(default_factory=lambda: os.getenv("AI_MODEL", "gemini-2.5-flash"))
    base_url: str = field(default_factory=lambda: os.getenv("AI_BASE_URL", ""))
    timeout_sec: int = field(default_factory=lambda: _get_int_env("AI_TIMEOUT_SEC", 60))

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def get_normalized_base_url(self) -> str:
        """
        Get normalized base_url for OpenAI SDK.

        The OpenAI SDK expects a *base* URL without the endpoint.
        For Gemini, falls back to its OpenAI-compatible base URL.
        """
        u = (self.base_url or "").strip()
        if not u:
            if self.provider.lower() == "gemini":
                return "https://generativelanguage.googleapis.com/v1beta/openai/"
            return ""  # OpenAI SDK will use default

        u = u.rstrip("/")
        if u.endswith("/chat/completions"):
            u = u[: -len("/chat/completions")]

        return u.rstrip("/") + "/"


@dataclass
class ReportConfig:
    """PDF register configuration."""
    page_size: str = field(default_factory=lambda: os.getenv("REPORT_PAGE_SIZE", "A4").upper())
    authority: str = field(
        default_factory=lambda: os.getenv("REPORT_AUTHORITY", "Election Commission of India")
    )
    app_name: str = "BLO Register"


@dataclass
class Config:
    """
    Main application configuration.

    All settings are loaded from environment variables with sensible defaults.
    Set DEBUG=1 in environment to enable debug mode.
    """

    # Base directory (project root)
    base_dir: Path = field(default_factory=lambda: Path(__file__).resolve().parents[2])

    # Directory paths
    data_dir: Path = field(default=None)
    exports_dir: Path = field(default=None)
    logs_dir: Path = field(default=None)

    # Debug mode (enables verbose console logging)
    debug: bool = field(default_factory=lambda: _get_bool_env("DEBUG", False))
    log_to_file: bool = field(default_factory=lambda: _get_bool_env("LOG_TO_FILE", True))

    # Sub-configurations
    assistant: AssistantConfig = field(default_factory=AssistantConfig)
    report: ReportConfig = field(default_factory=ReportConfig)

    def __post_init__(self):
        """Resolve paths after initialization."""
        self.base_dir = Path(self.base_dir)
        if self.data_dir is None:
            self.data_dir = self.base_dir / os.getenv("BLO_DATA_DIR", "data")
        if self.exports_dir is None:
            self.exports_dir = self.base_dir / os.getenv("BLO_EXPORTS_DIR", "exports")
        if self.logs_dir is None:
            self.logs_dir = self.base_dir / os.getenv("LOG_DIR", "logs")

        self.data_dir = Path(self.data_dir)
        self.exports_dir = Path(self.exports_dir)
        self.logs_dir = Path(self.logs_dir)

    def get_export_path(self, filename: str) -> Path:
        """Get path for an export file, creating the exports directory."""
        self.exports_dir.mkdir(parents=True, exist_ok=True)
        return self.exports_dir / filename


# Global config instance (lazily initialized)
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _config
    _config = None
