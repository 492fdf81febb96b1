from __future__ import annotations

from dataclasses import dataclass
import os

from perftree.domain.perft.position import STARTING_FEN
from perftree.domain.perft.session import DEFAULT_DEPTH

DEFAULT_PREFIX = "PERFTREE_"


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Centralized runtime configuration for a perftree session."""

    stockfish_path: str = "stockfish"
    default_depth: int = DEFAULT_DEPTH
    default_fen: str = STARTING_FEN
    log_level: str = "WARNING"
    parallel: bool = True


def load_config(prefix: str = DEFAULT_PREFIX) -> AppConfig:
    """Load configuration from environment variables."""

    def _get_env(key: str, default: str = "") -> str:
        env_key = f"{prefix}{key}"
        return os.getenv(env_key, default)

    def _parse_depth(raw: str, fallback: int) -> int:
        try:
            value = int(raw)
        except (TypeError, ValueError):
            return fallback
        return value if value >= 0 else fallback

    def _parse_flag(raw: str, fallback: bool) -> bool:
        lowered = raw.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
        return fallback

    return AppConfig(
        stockfish_path=_get_env("STOCKFISH_PATH", "stockfish") or "stockfish",
        default_depth=_parse_depth(_get_env("DEFAULT_DEPTH", str(DEFAULT_DEPTH)), DEFAULT_DEPTH),
        default_fen=_get_env("DEFAULT_FEN", "") or STARTING_FEN,
        log_level=_get_env("LOG_LEVEL", "WARNING") or "WARNING",
        parallel=_parse_flag(_get_env("PARALLEL", "1"), True),
    )


__all__ = ["AppConfig", "DEFAULT_PREFIX", "load_config"]
