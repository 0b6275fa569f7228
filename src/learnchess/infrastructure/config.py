from __future__ import annotations

from dataclasses import dataclass, field
import os


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Centralized runtime configuration for backend services."""

    database_url: str
    flask_env: str = "production"
    default_difficulty: str = "medium"
    opponent_delay_ms: int = 500
    opponent_seed: int | None = None
    additional: dict[str, str] = field(default_factory=dict)


def load_config(prefix: str = "") -> AppConfig:
    """Load application configuration from environment variables."""

    def _get_env(key: str, default: str = "") -> str:
        env_key = f"{prefix}{key}"
        return os.getenv(env_key, default)

    def _parse_int(raw: str, fallback: int | None) -> int | None:
        try:
            return int(raw)
        except (TypeError, ValueError):
            return fallback

    database_url = _get_env("DATABASE_URL", "sqlite+pysqlite:///learnchess.db")
    opponent_delay_ms = _parse_int(_get_env("OPPONENT_DELAY_MS", "500"), 500)
    opponent_seed = _parse_int(_get_env("OPPONENT_SEED", ""), None)

    default_difficulty = _get_env("DEFAULT_DIFFICULTY", "medium").lower()
    if default_difficulty not in {"easy", "medium", "hard"}:
        default_difficulty = "medium"

    additional_keys = ("STRUCTLOG_LEVEL",)
    additional: dict[str, str] = {}
    for key in additional_keys:
        value = _get_env(key, "")
        if value:
            additional[key] = value

    return AppConfig(
        database_url=database_url,
        flask_env=_get_env("FLASK_ENV", "production"),
        default_difficulty=default_difficulty,
        opponent_delay_ms=max(0, opponent_delay_ms or 0),
        opponent_seed=opponent_seed,
        additional=additional,
    )


__all__ = ["AppConfig", "load_config"]
