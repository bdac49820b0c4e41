"""
Galaxy Finance Quest - Progress Persistence
The gateway the engine saves through. Only UserProgress is stored.

A missing snapshot means first run. An unreadable one is logged and also
treated as first run; it stays on disk until the next save replaces it.
"""

import os
import logging
from typing import Optional

from models import UserProgress, progress_to_json, progress_from_json

logger = logging.getLogger("galaxy.persistence")

SNAPSHOT_FILENAME = "progress.json"


class ProgressStore:
    """Load/save contract for the progress snapshot."""

    def load(self) -> Optional[UserProgress]:
        raise NotImplementedError

    def save(self, progress: UserProgress):
        raise NotImplementedError

    def clear(self):
        raise NotImplementedError


class JsonFileStore(ProgressStore):
    """Snapshot kept as a single JSON file, replaced atomically on save."""

    def __init__(self, path: str):
        self.path = path

    @classmethod
    def in_directory(cls, data_dir: str) -> "JsonFileStore":
        return cls(os.path.join(data_dir, SNAPSHOT_FILENAME))

    def load(self) -> Optional[UserProgress]:
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return progress_from_json(f.read())
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"Unreadable progress snapshot {self.path}: {e}")
            return None

    def save(self, progress: UserProgress):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = self.path + ".tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(progress_to_json(progress))
        os.replace(tmp_path, self.path)

    def clear(self):
        if os.path.exists(self.path):
            os.remove(self.path)
            logger.info(f"Cleared progress snapshot {self.path}")


class MemoryStore(ProgressStore):
    """In-process store. Keeps the serialized JSON so round trips are real."""

    def __init__(self, initial: UserProgress = None):
        self.data: Optional[str] = None
        self.save_count = 0
        if initial is not None:
            self.data = progress_to_json(initial)

    def load(self) -> Optional[UserProgress]:
        if self.data is None:
            return None
        return progress_from_json(self.data)

    def save(self, progress: UserProgress):
        self.data = progress_to_json(progress)
        self.save_count += 1

    def clear(self):
        self.data = None
