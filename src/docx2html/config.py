"""Runtime settings sourced from environment variables.

All variables share the ``DOCX2HTML_`` prefix::

    DOCX2HTML_FETCH_TIMEOUT_S   HTTP timeout for template downloads (30)
    DOCX2HTML_MAX_FILE_SIZE_MB  upload / download size limit (25)
    DOCX2HTML_HEADING_ALIASES   "Ttulo1=1,Ttulo2=2,Ttulo3=3"; empty disables
    DOCX2HTML_CORS_ORIGINS      comma separated origins ("*")
    DOCX2HTML_LOG_LEVEL         logging level name (INFO)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Mapping, Optional

from docx2html.assembler import DEFAULT_HEADING_ALIASES

ENV_PREFIX = "DOCX2HTML_"


@dataclass(frozen=True)
class Settings:
    fetch_timeout_s: float = 30.0
    max_file_size_mb: int = 25
    heading_aliases: Mapping[str, int] = field(
        default_factory=lambda: dict(DEFAULT_HEADING_ALIASES)
    )
    cors_origins: tuple[str, ...] = ("*",)
    log_level: str = "INFO"

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024


def parse_heading_aliases(value: Optional[str]) -> dict[str, int]:
    """Parse ``"Style=1,Other=2"``; ``None`` means defaults, ``""`` means none."""
    if value is None:
        return dict(DEFAULT_HEADING_ALIASES)
    aliases: dict[str, int] = {}
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        name, sep, level = item.partition("=")
        if not sep or not name.strip():
            raise ValueError(f"Invalid heading alias {item!r}; expected NAME=LEVEL")
        aliases[name.strip()] = int(level)
    return aliases


def _split_csv(value: Optional[str], default: tuple[str, ...]) -> tuple[str, ...]:
    if value is None:
        return default
    return tuple(part.strip() for part in value.split(",") if part.strip())


def read_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ
    defaults = Settings()
    timeout = env.get(f"{ENV_PREFIX}FETCH_TIMEOUT_S")
    max_size = env.get(f"{ENV_PREFIX}MAX_FILE_SIZE_MB")
    return Settings(
        fetch_timeout_s=float(timeout) if timeout else defaults.fetch_timeout_s,
        max_file_size_mb=int(max_size) if max_size else defaults.max_file_size_mb,
        heading_aliases=parse_heading_aliases(env.get(f"{ENV_PREFIX}HEADING_ALIASES")),
        cors_origins=_split_csv(env.get(f"{ENV_PREFIX}CORS_ORIGINS"), defaults.cors_origins),
        log_level=env.get(f"{ENV_PREFIX}LOG_LEVEL", defaults.log_level).upper(),
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return read_settings()


__all__ = ["Settings", "get_settings", "read_settings", "parse_heading_aliases"]
