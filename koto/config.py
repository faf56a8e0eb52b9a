"""Runtime configuration: file locations, log level and colour."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_HOME = Path.home() / ".koto"
DB_FILENAME = "koto.db"
LOG_FILENAME = "koto.log"


@dataclass
class Config:
    """Application configuration."""

    home_dir: Path = DEFAULT_HOME
    db_path: Path | None = None
    log_file: Path | None = None
    log_level: str = "WARNING"
    use_color: bool = True
    memory: bool = False

    def __post_init__(self):
        self.home_dir = Path(self.home_dir).expanduser()
        if self.db_path is None:
            self.db_path = self.home_dir / DB_FILENAME
        if self.log_file is None:
            self.log_file = self.home_dir / LOG_FILENAME

    @classmethod
    def from_env(cls, environ: dict | None = None) -> "Config":
        """Build a config from KOTO_* environment variables."""
        env = os.environ if environ is None else environ
        home = Path(env.get("KOTO_HOME") or DEFAULT_HOME).expanduser()
        db_path = env.get("KOTO_DB_PATH")
        return cls(
            home_dir=home,
            db_path=Path(db_path).expanduser() if db_path else None,
            log_level=env.get("KOTO_LOG_LEVEL", "WARNING").upper(),
            use_color="NO_COLOR" not in env,
        )

    def ensure_home(self) -> Path:
        """Create the koto directory (mode 0700) if missing."""
        self.home_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
        return self.home_dir
