"""Tests for error types."""

import json

from ghdiff.errors import (
    BufferExceededError,
    DiffParseError,
    GhDiffError,
    GitCommandError,
    GitStderrError,
)


class TestGhDiffError:
    """Test the base error."""

    def test_to_dict_without_details(self):
        error = GhDiffError("SOME_CODE", "something went wrong")

        assert error.to_dict() == {"code": "SOME_CODE", "message": "something went wrong"}

    def test_to_dict_with_details(self):
        error = BufferExceededError("stdout", 2048)

        assert error.to_dict() == {
            "code": "MAX_BUFFER_EXCEEDED",
            "message": "stdout maxBuffer length exceeded (2048 bytes)",
            "details": {"stream": "stdout", "max_buffer_size": 2048},
        }

    def test_str_is_message(self):
        error = DiffParseError("hunk is shorter than expected")

        assert str(error) == "Failed to parse git diff: hunk is shorter than expected"
        assert error.details == {"reason": "hunk is shorter than expected"}


class TestGitErrors:
    """Test git failure errors."""

    def test_command_error_details(self):
        error = GitCommandError(["git", "--no-pager", "diff", "nope"], "fatal: bad revision", 128)

        data = error.to_dict()

        assert data["message"] == "Command failed: git --no-pager diff nope\nfatal: bad revision"
        assert data["details"] == {
            "command": ["git", "--no-pager", "diff", "nope"],
            "returncode": 128,
            "reason": "fatal: bad revision",
        }
        assert json.loads(json.dumps(data)) == data

    def test_stderr_error_keeps_stderr(self):
        error = GitStderrError("warning: odd\n")

        assert error.code == "GIT_STDERR"
        assert error.to_dict()["details"] == {"stderr": "warning: odd\n"}
