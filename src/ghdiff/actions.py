"""Pipeline input/output for GitHub Actions and in-process callers."""

import logging
import os
import sys
import uuid
from typing import Dict, Mapping, Optional, TextIO

from .logging_utils import escape_data
from .settings import get_output_file

logger = logging.getLogger(__name__)


class PipelineIO:
    """Named inputs in, named outputs and a failure signal out."""

    def __init__(self) -> None:
        self.outputs: Dict[str, str] = {}
        self.failed = False
        self.failure_message: Optional[str] = None

    def get_input(self, name: str) -> str:
        """Return the named input, or an empty string when it is not set."""
        raise NotImplementedError

    def set_output(self, name: str, value: str) -> None:
        """Publish a named output."""
        self.outputs[name] = value

    def set_failed(self, message: str) -> None:
        """Mark the step as failed."""
        self.failed = True
        self.failure_message = message


class MemoryIO(PipelineIO):
    """Inputs from a mapping, outputs kept in memory."""

    def __init__(self, inputs: Optional[Mapping[str, Optional[str]]] = None):
        super().__init__()
        self.inputs = dict(inputs or {})

    def get_input(self, name: str) -> str:
        value = self.inputs.get(name)
        return "" if value is None else str(value).strip()

    def set_failed(self, message: str) -> None:
        super().set_failed(message)
        logger.error(message)


class ActionsIO(PipelineIO):
    """The GitHub Actions runner protocol.

    Inputs come from ``INPUT_<NAME>`` environment variables. Outputs are
    appended to the file named by ``GITHUB_OUTPUT``; multiline values use
    heredoc syntax. Failures are reported with an ``::error::`` command and
    the caller is expected to exit non-zero.
    """

    def __init__(
        self,
        environ: Optional[Mapping[str, str]] = None,
        output_file: Optional[str] = None,
        stream: Optional[TextIO] = None,
    ):
        super().__init__()
        self.environ = os.environ if environ is None else environ
        self.output_file = output_file if output_file is not None else get_output_file()
        self.stream = stream or sys.stdout

    @staticmethod
    def input_env_name(name: str) -> str:
        return "INPUT_" + name.replace(" ", "_").upper()

    def get_input(self, name: str) -> str:
        return self.environ.get(self.input_env_name(name), "").strip()

    def set_output(self, name: str, value: str) -> None:
        super().set_output(name, value)
        if not self.output_file:
            # Runners without GITHUB_OUTPUT still honour the legacy command
            self.stream.write(f"::set-output name={name}::{escape_data(value)}\n")
            return
        with open(self.output_file, "a", encoding="utf-8") as f:
            f.write(format_output(name, value))

    def set_failed(self, message: str) -> None:
        super().set_failed(message)
        self.stream.write(f"::error::{escape_data(message)}\n")
        self.stream.flush()


def format_output(key: str, value: str) -> str:
    """Format one key/value pair for the step output file."""
    if "\n" not in value and "\r" not in value:
        return f"{key}={value}\n"

    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    while delimiter in value:
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
    return f"{key}<<{delimiter}\n{value}\n{delimiter}\n"
