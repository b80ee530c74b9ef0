"""
pulso/config.py — runtime settings.

Read once from the environment (and .env in the project root) by the CLI,
then passed into constructors. Library modules never read os.environ.

Variables:
  GEMINI_API_KEY      Gemini API key (required by `pulso analyze`)
  GEMINI_MODEL        model id (default gemini-2.5-flash)
  PULSO_MIN_COMMENTS  units with fewer comments are not analysed (default 3)
  PULSO_CALL_DELAY    seconds between unit calls (default 1.0)
  PGHOST, PGPORT, PGDATABASE, PGUSER, PGPASSWORD
"""

from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass

from dotenv import load_dotenv

from llm_query.gemini import DEFAULT_MODEL, DEFAULT_RETRIES

ROOT     = pathlib.Path(__file__).resolve().parent.parent
ENV_PATH = ROOT / ".env"


def _int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True, slots=True)
class Settings:
    gemini_api_key: str | None = None
    gemini_model: str = DEFAULT_MODEL
    max_retries: int = DEFAULT_RETRIES
    retry_base_delay: float = 10.0
    min_comments: int = 3
    call_delay: float = 1.0

    pg_host: str = "localhost"
    pg_port: int = 5432
    pg_database: str = "pulso"
    pg_user: str = "pulso"
    pg_password: str = "pulso"

    @classmethod
    def from_env(cls, env_path: pathlib.Path | None = ENV_PATH) -> Settings:
        """Loads .env (variables already set in the environment win)."""
        if env_path is not None and env_path.exists():
            load_dotenv(env_path, override=False)
        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
            gemini_model=os.getenv("GEMINI_MODEL") or DEFAULT_MODEL,
            min_comments=_int("PULSO_MIN_COMMENTS", 3),
            call_delay=_float("PULSO_CALL_DELAY", 1.0),
            pg_host=os.getenv("PGHOST", "localhost"),
            pg_port=_int("PGPORT", 5432),
            pg_database=os.getenv("PGDATABASE", "pulso"),
            pg_user=os.getenv("PGUSER", "pulso"),
            pg_password=os.getenv("PGPASSWORD", "pulso"),
        )
