"""Plugin settings: persistence via JSON."""

import json
import logging
import os
from dataclasses import dataclass, asdict

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = os.path.join(os.path.expanduser('~'), '.permacanonical')


@dataclass
class PluginSettings:
    """Persistent plugin/updater settings."""
    # Identity
    plugin_basename: str = "permacanonical/permacanonical.php"
    github_owner: str = "webfor"
    github_repo: str = "permacanonical"

    # Paths
    plugins_dir: str = ""
    data_dir: str = ""

    # Updater
    cache_enabled: bool = True
    cache_ttl_hours: int = 12
    request_timeout: int = 10           # seconds

    def __post_init__(self):
        if not self.data_dir:
            self.data_dir = DEFAULT_DATA_DIR
        if not self.plugins_dir:
            self.plugins_dir = os.path.join(self.data_dir, 'plugins')

    @property
    def cache_path(self) -> str:
        return os.path.join(self.data_dir, 'update-cache.json')

    @property
    def cache_ttl_seconds(self) -> int:
        return self.cache_ttl_hours * 3600

    @staticmethod
    def default_path() -> str:
        return os.path.join(DEFAULT_DATA_DIR, 'settings.json')

    @staticmethod
    def load(path: str | None = None) -> 'PluginSettings':
        """Load settings from JSON. Returns defaults if file doesn't exist."""
        if path is None:
            path = PluginSettings.default_path()

        if not os.path.isfile(path):
            logger.info("No settings file, using defaults")
            return PluginSettings()

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            settings = PluginSettings(**{k: v for k, v in data.items()
                                         if k in PluginSettings.__dataclass_fields__})
            logger.info("Loaded settings from %s", path)
            return settings
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Failed to load settings: %s", e)
            return PluginSettings()

    def save(self, path: str | None = None):
        """Save settings to JSON."""
        if path is None:
            path = os.path.join(self.data_dir, 'settings.json')

        try:
            directory = os.path.dirname(path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(asdict(self), f, indent=2)
            logger.info("Saved settings to %s", path)
        except OSError as e:
            logger.warning("Failed to save settings: %s", e)

    def ensure_dirs(self):
        """Create data directories if they don't exist."""
        os.makedirs(self.data_dir, exist_ok=True)
        os.makedirs(os.path.join(self.data_dir, 'logs'), exist_ok=True)
