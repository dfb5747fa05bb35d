"""Configuration management for ghdiff."""

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_MAX_BUFFER_SIZE = 1_000_000

# Leading integer, the way a lenient integer parse reads "2048kb" as 2048
# and "0x10" as 16
_INT_PREFIX = re.compile(r"^\s*([+-]?)(0[xX][0-9a-fA-F]+|\d+)")

InputReader = Callable[[str], str]


def parse_max_buffer_size(value: Optional[str]) -> Optional[int]:
    """Return the integer prefix of ``value``, or None if there is none.

    A ``0x`` prefix followed by hex digits is read as hexadecimal.
    """
    if value is None:
        return None
    match = _INT_PREFIX.match(str(value))
    if not match:
        return None
    sign, digits = match.groups()
    number = int(digits, 16) if digits[:2].lower() == "0x" else int(digits)
    return -number if sign == "-" else number


def resolve_max_buffer_size(value: Optional[str]) -> int:
    """Resolve the max_buffer_size input to an effective byte cap."""
    parsed = parse_max_buffer_size(value)
    if parsed is None or parsed <= 0:
        logger.info(
            "max_buffer_size is not defined, using default of %d",
            DEFAULT_MAX_BUFFER_SIZE,
        )
        return DEFAULT_MAX_BUFFER_SIZE
    return parsed


def parse_bool_input(value: Optional[str]) -> bool:
    """Only the literal string "true" enables a boolean input."""
    return value == "true"


@dataclass(frozen=True)
class ActionConfig:
    """Configuration for a single git diff invocation."""

    # Required parameters
    base_branch: str
    search_path: str

    # Process output cap (in bytes)
    max_buffer_size: int = DEFAULT_MAX_BUFFER_SIZE

    # Output options
    file_output_only: bool = False
    raw_diff_file_output: Optional[str] = None
    json_diff_file_output: Optional[str] = None

    # Extra arguments placed before the ref and path
    git_options: str = ""

    # Directory git runs in, None for the current directory
    working_directory: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.max_buffer_size <= 0:
            raise ValueError("max_buffer_size must be positive")

    @classmethod
    def from_inputs(cls, get_input: InputReader) -> "ActionConfig":
        """Build the configuration from named pipeline inputs, read once."""
        base_branch = get_input("base_branch")
        logger.debug("base_branch: %s", base_branch)
        search_path = get_input("search_path")
        logger.debug("search_path: %s", search_path)

        max_buffer_size = resolve_max_buffer_size(get_input("max_buffer_size"))
        logger.debug("max_buffer_size: %d", max_buffer_size)

        file_output_only = parse_bool_input(get_input("file_output_only"))
        git_options = get_input("git_options")

        return cls(
            base_branch=base_branch,
            search_path=search_path,
            max_buffer_size=max_buffer_size,
            file_output_only=file_output_only,
            raw_diff_file_output=get_input("raw_diff_file_output") or None,
            json_diff_file_output=get_input("json_diff_file_output") or None,
            git_options=git_options,
            working_directory=get_input("working_directory") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to a plain dictionary for logging and responses."""
        return {
            "base_branch": self.base_branch,
            "search_path": self.search_path,
            "max_buffer_size": self.max_buffer_size,
            "file_output_only": self.file_output_only,
            "git_options": self.git_options,
            "raw_diff_file_output": self.raw_diff_file_output,
            "json_diff_file_output": self.json_diff_file_output,
            "working_directory": self.working_directory,
        }
