"""Version control system operations for ghdiff."""

import logging
import os
import shlex
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from .config import ActionConfig
from .errors import BufferExceededError, GitCommandError, InvalidInputError

logger = logging.getLogger(__name__)

_READ_CHUNK_SIZE = 64 * 1024


@dataclass
class GitDiffOutput:
    """Captured result of one git diff invocation."""

    command: List[str]
    stdout: str
    stderr: str
    returncode: int


def build_diff_command(config: ActionConfig) -> List[str]:
    """Build the git diff argument vector.

    ``git_options`` is split with shell quoting rules; the base branch and
    search path are always single arguments. Empty values are left out.
    """
    try:
        options = shlex.split(config.git_options)
    except ValueError as e:
        raise InvalidInputError("git_options", str(e)) from e

    cmd = ["git", "--no-pager", "diff"] + options
    for name, value in (
        ("base_branch", config.base_branch),
        ("search_path", config.search_path),
    ):
        if value:
            cmd.append(value)
        else:
            logger.debug("%s is empty, omitting it from the git command", name)
    return cmd


class GitDiffRunner:
    """Runs git diff with a cap on captured output."""

    def __init__(self, config: ActionConfig):
        """Initialize with configuration."""
        self.config = config

    @property
    def git_env(self) -> Dict[str, str]:
        """Environment for the child process, never prompting for input."""
        env = os.environ.copy()
        env.update(
            {
                "GIT_TERMINAL_PROMPT": "0",
                "GCM_INTERACTIVE": "never",
            }
        )
        return env

    def _resolve_cwd(self) -> Optional[Path]:
        if not self.config.working_directory:
            return None
        cwd = Path(self.config.working_directory)
        if not cwd.is_dir():
            raise InvalidInputError("working_directory", f"{cwd} is not a directory")
        return cwd

    def run(self) -> GitDiffOutput:
        """Run git diff and capture its output.

        Raises GitCommandError when git cannot be started or exits non-zero,
        and BufferExceededError when stdout or stderr grows past
        ``max_buffer_size`` bytes.
        """
        cmd = build_diff_command(self.config)
        cwd = self._resolve_cwd()
        cap = self.config.max_buffer_size
        logger.debug("Running git", extra={"command": cmd, "cwd": str(cwd or ".")})

        with tempfile.TemporaryFile() as stderr_file:
            try:
                process = subprocess.Popen(
                    cmd,
                    cwd=cwd,
                    env=self.git_env,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.PIPE,
                    stderr=stderr_file,
                )
            except OSError as e:
                raise GitCommandError(cmd, str(e)) from e

            with process:
                stdout = self._read_capped(process, cap)
                returncode = process.wait()

            stderr_file.seek(0)
            stderr_bytes = stderr_file.read(cap + 1)
            if len(stderr_bytes) > cap:
                raise BufferExceededError("stderr", cap)

        stderr = stderr_bytes.decode("utf-8", errors="replace")
        if returncode != 0:
            raise GitCommandError(cmd, stderr, returncode)

        logger.debug(
            "git finished",
            extra={"returncode": returncode, "stdout_bytes": len(stdout)},
        )
        return GitDiffOutput(
            command=cmd,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr,
            returncode=returncode,
        )

    def _read_capped(self, process: subprocess.Popen, cap: int) -> bytes:
        """Read stdout to EOF, killing the process once it passes ``cap``."""
        chunks = []
        size = 0
        while True:
            chunk = process.stdout.read(_READ_CHUNK_SIZE)
            if not chunk:
                break
            size += len(chunk)
            if size > cap:
                process.kill()
                raise BufferExceededError("stdout", cap)
            chunks.append(chunk)
        return b"".join(chunks)
