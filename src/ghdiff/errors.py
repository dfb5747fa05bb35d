"""Error definitions and handling for ghdiff."""

from typing import Any, Dict, List, Optional


class GhDiffError(Exception):
    """Base exception for ghdiff errors."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize error with code, message, and optional details."""
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for JSON serialization."""
        result = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class GitCommandError(GhDiffError):
    """git could not be started or exited with a non-zero status."""

    def __init__(self, command: List[str], reason: str, returncode: Optional[int] = None):
        super().__init__(
            code="GIT_COMMAND_FAILED",
            message=f"Command failed: {' '.join(command)}\n{reason}".rstrip(),
            details={"command": command, "returncode": returncode, "reason": reason},
        )


class GitStderrError(GhDiffError):
    """git wrote to its error stream."""

    def __init__(self, stderr: str):
        super().__init__(
            code="GIT_STDERR",
            message=f"git diff error: {stderr}",
            details={"stderr": stderr},
        )


class BufferExceededError(GhDiffError):
    """Captured process output grew past max_buffer_size."""

    def __init__(self, stream: str, max_buffer_size: int):
        super().__init__(
            code="MAX_BUFFER_EXCEEDED",
            message=f"{stream} maxBuffer length exceeded ({max_buffer_size} bytes)",
            details={"stream": stream, "max_buffer_size": max_buffer_size},
        )


class DiffParseError(GhDiffError):
    """Raw diff text could not be parsed."""

    def __init__(self, reason: str):
        super().__init__(
            code="DIFF_PARSE_FAILED",
            message=f"Failed to parse git diff: {reason}",
            details={"reason": reason},
        )


class InvalidInputError(GhDiffError):
    """A pipeline input has a value that cannot be used."""

    def __init__(self, name: str, reason: str):
        super().__init__(
            code="INPUT_INVALID",
            message=f"Invalid input {name}: {reason}",
            details={"input": name, "reason": reason},
        )
