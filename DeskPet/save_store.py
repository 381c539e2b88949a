import json
import logging
import os

from constants import SAVE_FILE
from errors import PersistenceFailure

logger = logging.getLogger(__name__)


class JsonSaveStore:
    """Keeps the pet snapshot in a single JSON file next to the app."""

    def __init__(self, path=SAVE_FILE):
        self.path = str(path)

    def load(self):
        """Returns the saved payload, or None when nothing has been saved yet."""
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise PersistenceFailure(f"failed to read save file '{self.path}': {e}") from e
        if not isinstance(data, dict):
            raise PersistenceFailure(f"save file '{self.path}' does not hold an object")
        return data

    def save(self, snapshot):
        """Uses a simple atomic replace pattern to avoid truncated saves."""
        tmp = self.path + ".tmp"
        try:
            with open(tmp, 'w', encoding='utf-8') as f:
                json.dump(snapshot, f, ensure_ascii=False)
            os.replace(tmp, self.path)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceFailure(f"failed to write save file '{self.path}': {e}") from e
        logger.debug("Saved pet to %s", self.path)
