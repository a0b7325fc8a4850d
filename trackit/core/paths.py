"""
Centralized path management for trackit.

Resolves where the key-value store, export snapshots and logs live.
"""

import os
import sys
from pathlib import Path
from typing import Optional
import logging


class PathManager:
    """Manages trackit file locations with an environment override."""

    APP_DIR_NAME = "trackit"
    HOME_ENV_VAR = "TRACKIT_HOME"

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self._working_dir: Optional[Path] = None

    def _default_user_dir(self) -> Path:
        """Platform-appropriate per-user data directory."""
        if sys.platform == "darwin":
            return Path.home() / "Library" / "Application Support" / self.APP_DIR_NAME
        if sys.platform.startswith("win"):
            appdata = os.environ.get("APPDATA")
            if appdata:
                return Path(appdata) / self.APP_DIR_NAME
            return Path.home() / "AppData" / "Roaming" / self.APP_DIR_NAME
        xdg = os.environ.get("XDG_CONFIG_HOME")
        if xdg:
            return Path(xdg) / self.APP_DIR_NAME
        return Path.home() / ".config" / self.APP_DIR_NAME

    @property
    def working_dir(self) -> Path:
        """
        Get the working directory for trackit data.

        Priority order:
        1. TRACKIT_HOME environment variable (explicit override)
        2. Platform user data directory
        """
        if self._working_dir is not None:
            return self._working_dir

        env_override = os.environ.get(self.HOME_ENV_VAR)
        if env_override:
            self._working_dir = Path(env_override).expanduser().resolve()
            self.logger.debug(f"Using {self.HOME_ENV_VAR} override: {self._working_dir}")
        else:
            self._working_dir = self._default_user_dir()
            self.logger.debug(f"Using user data directory: {self._working_dir}")

        return self._working_dir

    @property
    def data_dir(self) -> Path:
        """Directory holding the key-value store files."""
        return self.working_dir / "data"

    @property
    def backup_dir(self) -> Path:
        """Directory receiving exported snapshots."""
        return self.working_dir / "backups"

    @property
    def log_dir(self) -> Path:
        return self.working_dir / "logs"

    def ensure_directories(self) -> None:
        """Ensure all required directories exist."""
        for directory in (self.working_dir, self.data_dir, self.backup_dir, self.log_dir):
            directory.mkdir(parents=True, exist_ok=True)
            self.logger.debug(f"Ensured directory exists: {directory}")


# Global instance for convenience
_path_manager = None


def get_path_manager() -> PathManager:
    """Get or create the global PathManager instance."""
    global _path_manager
    if _path_manager is None:
        _path_manager = PathManager()
    return _path_manager
