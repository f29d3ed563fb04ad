# carwatch/snapshot.py
"""Whole-batch JSON persistence for the latest ranked listings."""
import json
import os
import tempfile
from pydantic import TypeAdapter, ValidationError

from .config import SNAPSHOT_PATH
from .errors import PersistenceError
from .schemas import ScoredListing
from .utils import logger

_listings_adapter = TypeAdapter(list[ScoredListing])
# NamedTemporaryFile creates files as 0600
SNAPSHOT_MODE = 0o644


class SnapshotStore:
    def __init__(self, path: str = SNAPSHOT_PATH):
        self.path = path

    def write(self, listings: list[ScoredListing]) -> None:
        """Replace the stored snapshot.

        The batch goes to a temporary file beside the target which is then
        renamed over it, so readers see either the old file or the new one.
        """
        directory = os.path.dirname(os.path.abspath(self.path))
        payload = [item.model_dump(by_alias=True) for item in listings]
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=directory, prefix=".listings-", suffix=".tmp", delete=False
            ) as fh:
                tmp_path = fh.name
                json.dump(payload, fh, ensure_ascii=False, indent=2)
                fh.flush()
                os.fsync(fh.fileno())
            os.chmod(tmp_path, SNAPSHOT_MODE)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise PersistenceError(f"Unable to write snapshot to {self.path}: {e}") from e
        logger.info("Saved %d listings to %s", len(listings), self.path)

    def read(self) -> list[ScoredListing]:
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                raw = json.load(fh)
            return _listings_adapter.validate_python(raw)
        except FileNotFoundError:
            logger.info("No snapshot at %s yet", self.path)
        except (OSError, ValueError, ValidationError) as e:
            logger.error("Failed to read snapshot %s: %s", self.path, e)
        return []
