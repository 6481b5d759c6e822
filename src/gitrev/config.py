import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

DEFAULT_TIMEOUT = 60.0


@dataclass(frozen=True)
class Settings:
    git_binary: str = "git"
    # Seconds before a git invocation is killed. None means no deadline.
    timeout: Optional[float] = DEFAULT_TIMEOUT
    repo_path: Path = Path(".")
    allowed_origins: Optional[List[str]] = None
    log_level: str = "INFO"


def _read_timeout(raw: Optional[str]) -> Optional[float]:
    if raw is None or raw.strip() == "":
        return DEFAULT_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"GITREV_TIMEOUT must be a number of seconds, got {raw!r}")
    if value <= 0:
        return None
    return value


def get_settings() -> Settings:
    """Read settings from the environment. Called per use so tests can patch env."""
    origins = os.getenv("ALLOWED_ORIGINS", "*")
    return Settings(
        git_binary=os.getenv("GITREV_GIT_BINARY", "git"),
        timeout=_read_timeout(os.getenv("GITREV_TIMEOUT")),
        repo_path=Path(os.getenv("GITREV_REPO", ".")),
        allowed_origins=[origin.strip() for origin in origins.split(",")],
        log_level=os.getenv("GITREV_LOG_LEVEL", "INFO").upper(),
    )
