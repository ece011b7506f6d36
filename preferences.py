import json
import logging
from pathlib import Path

from config import PREFERENCE_SETTINGS

logger = logging.getLogger(__name__)


class Preferences:
    """Boolean user preferences persisted to a small JSON file."""

    def __init__(self, path=PREFERENCE_SETTINGS["file"], defaults=None):
        self.path = Path(path)
        self.defaults = dict(defaults or PREFERENCE_SETTINGS["defaults"])

    def _load(self):
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable preferences file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring preferences file %s: expected an object", self.path)
            return {}
        return data

    def as_dict(self):
        """Return every known preference with stored values over defaults."""
        stored = self._load()
        return {name: bool(stored.get(name, default)) for name, default in self.defaults.items()}

    def get(self, name):
        if name not in self.defaults:
            raise KeyError(name)
        return self.as_dict()[name]

    def set(self, name, value):
        if name not in self.defaults:
            raise KeyError(name)
        data = self.as_dict()
        data[name] = bool(value)
        with open(self.path, 'w') as f:
            json.dump(data, f, indent=2)
