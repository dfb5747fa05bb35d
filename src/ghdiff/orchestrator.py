"""Runs git diff and routes raw and structured results to step outputs."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .actions import PipelineIO
from .config import ActionConfig
from .diffparse import GitDiff, parse_git_diff
from .errors import GhDiffError, GitStderrError
from .serialize import DiffSerializer
from .vcs import GitDiffRunner

logger = logging.getLogger(__name__)

RAW_DIFF_OUTPUT = "raw-diff"
RAW_DIFF_PATH_OUTPUT = "raw-diff-path"
JSON_DIFF_OUTPUT = "json-diff"
JSON_DIFF_PATH_OUTPUT = "json-diff-path"

# Counted literally: file content containing this text inflates the raw count
FILE_HEADER_MARKER = "diff --git"


@dataclass
class DiffOutcome:
    """Result of one invocation: a parsed diff, or the reason there is none."""

    ok: bool
    diff: Optional[GitDiff] = None
    raw_diff: str = ""
    json_diff: str = ""
    raw_files_changed: int = 0
    files_changed: int = 0
    error: Optional[str] = None
    error_code: Optional[str] = None
    error_details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success(
        cls,
        diff: GitDiff,
        raw_diff: str,
        json_diff: str,
        raw_files_changed: int,
    ) -> "DiffOutcome":
        return cls(
            ok=True,
            diff=diff,
            raw_diff=raw_diff,
            json_diff=json_diff,
            raw_files_changed=raw_files_changed,
            files_changed=len(diff.files),
        )

    @classmethod
    def failure(
        cls,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ) -> "DiffOutcome":
        return cls(ok=False, error=message, error_code=code, error_details=details or {})

    def error_dict(self) -> Dict[str, Any]:
        """Error envelope for a failed outcome."""
        error: Dict[str, Any] = {"code": self.error_code, "message": self.error}
        if self.error_details:
            error["details"] = self.error_details
        return {"ok": False, "error": error}


def count_raw_files(raw_diff: str) -> int:
    """Approximate number of files in a raw diff."""
    return raw_diff.count(FILE_HEADER_MARKER)


def write_output_file(path: str, text: str) -> None:
    """Create or overwrite ``path`` with ``text`` exactly."""
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)


def run_git_diff(
    config: ActionConfig,
    io: PipelineIO,
    runner: Optional[GitDiffRunner] = None,
    serializer: Optional[DiffSerializer] = None,
) -> DiffOutcome:
    """Run git diff for ``config`` and publish the results through ``io``.

    Any failure marks the step failed through ``io.set_failed`` and comes
    back as a failed DiffOutcome. Outputs set before the failure stay set.
    """
    runner = runner or GitDiffRunner(config)
    serializer = serializer or DiffSerializer()

    try:
        output = runner.run()
        if output.stderr:
            raise GitStderrError(output.stderr)

        raw_diff = output.stdout
        raw_files_changed = count_raw_files(raw_diff)
        logger.info("total files changed (raw diff): %d", raw_files_changed)

        logger.debug("raw git diff: %s", raw_diff)
        if not config.file_output_only:
            io.set_output(RAW_DIFF_OUTPUT, raw_diff)

        if config.raw_diff_file_output:
            logger.debug("writing raw diff to %s", config.raw_diff_file_output)
            io.set_output(RAW_DIFF_PATH_OUTPUT, config.raw_diff_file_output)
            write_output_file(config.raw_diff_file_output, raw_diff)

        diff = parse_git_diff(raw_diff)
        json_diff = serializer.to_json(diff)

        logger.info("total files changed (json diff): %d", len(diff.files))

        logger.debug("jsonDiff: %s", json_diff)
        if not config.file_output_only:
            io.set_output(JSON_DIFF_OUTPUT, json_diff)

        if config.json_diff_file_output:
            logger.debug("writing json diff to %s", config.json_diff_file_output)
            io.set_output(JSON_DIFF_PATH_OUTPUT, config.json_diff_file_output)
            write_output_file(config.json_diff_file_output, json_diff)

        return DiffOutcome.success(diff, raw_diff, json_diff, raw_files_changed)

    except GitStderrError as e:
        io.set_failed(e.message)
        return DiffOutcome.failure(e.message, e.code, e.details)

    except GhDiffError as e:
        logger.debug("git diff step failed: %s", e.to_dict(), exc_info=True)
        message = f"error getting git diff: {e}"
        io.set_failed(message)
        return DiffOutcome.failure(message, e.code, e.details)

    except Exception as e:
        logger.debug("git diff step failed", exc_info=True)
        message = f"error getting git diff: {e}"
        io.set_failed(message)
        return DiffOutcome.failure(message, details={"exception_type": type(e).__name__})

