"""JSON serialization of structured diffs."""

import json
import logging
from typing import Any, Dict

from .diffparse import GitDiff

logger = logging.getLogger(__name__)


class DiffSerializer:
    """Renders a GitDiff to its canonical JSON text and reads it back."""

    def to_dict(self, diff: GitDiff) -> Dict[str, Any]:
        return diff.to_dict()

    def to_json(self, diff: GitDiff) -> str:
        """Compact JSON, keys in model order, non-ASCII kept as is."""
        json_str = json.dumps(
            self.to_dict(diff),
            ensure_ascii=False,
            separators=(",", ":"),
        )
        logger.debug("Serialized diff", extra={"files": len(diff.files), "chars": len(json_str)})
        return json_str

    def from_json(self, json_str: str) -> GitDiff:
        """Load a GitDiff from text previously produced by ``to_json``."""
        return GitDiff.from_dict(json.loads(json_str))

