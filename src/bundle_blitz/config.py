import os
from dataclasses import dataclass
from pathlib import Path

from bundle_blitz.ai.anthropic_client import DEFAULT_MODEL
from bundle_blitz.core.placement import DEFAULT_LINE_HEIGHT_PX


def _flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    state_dir: Path
    transpile: bool
    format: bool
    esbuild: str
    prettier: str
    stage_timeout: float
    model: str
    anthropic_api_key: str | None
    line_height_px: int


def get_settings() -> Settings:
    return Settings(
        state_dir=Path(os.getenv("BUNDLE_BLITZ_STATE_DIR", ".bundle_blitz")),
        transpile=_flag("BUNDLE_BLITZ_TRANSPILE", True),
        format=_flag("BUNDLE_BLITZ_FORMAT", False),
        esbuild=os.getenv("BUNDLE_BLITZ_ESBUILD", "esbuild"),
        prettier=os.getenv("BUNDLE_BLITZ_PRETTIER", "prettier"),
        stage_timeout=float(os.getenv("BUNDLE_BLITZ_STAGE_TIMEOUT", "60")),
        model=os.getenv("BUNDLE_BLITZ_MODEL", DEFAULT_MODEL),
        anthropic_api_key=os.getenv("ANTHROPIC_API_KEY") or None,
        line_height_px=int(os.getenv("BUNDLE_BLITZ_LINE_HEIGHT", str(DEFAULT_LINE_HEIGHT_PX))),
    )
