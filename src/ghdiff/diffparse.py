"""Structured diff model and parsing of raw git diff text."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from unidiff import PatchSet
from unidiff.errors import UnidiffParseError

from .errors import DiffParseError

logger = logging.getLogger(__name__)

DEV_NULL = "/dev/null"
NO_NEWLINE_MARKER = "\\"

ADDED_FILE = "AddedFile"
DELETED_FILE = "DeletedFile"
RENAMED_FILE = "RenamedFile"
CHANGED_FILE = "ChangedFile"

ADDED_LINE = "AddedLine"
DELETED_LINE = "DeletedLine"
UNCHANGED_LINE = "UnchangedLine"
MESSAGE_LINE = "MessageLine"


@dataclass
class FileRange:
    """Start line and line count of one side of a hunk."""

    start: int
    lines: int

    def to_dict(self) -> Dict[str, int]:
        return {"start": self.start, "lines": self.lines}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileRange":
        return cls(start=data["start"], lines=data["lines"])


@dataclass
class Change:
    """A single line inside a hunk."""

    type: str
    content: str
    line_before: Optional[int] = None
    line_after: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type}
        if self.line_before is not None:
            data["lineBefore"] = self.line_before
        if self.line_after is not None:
            data["lineAfter"] = self.line_after
        data["content"] = self.content
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Change":
        return cls(
            type=data["type"],
            content=data.get("content", ""),
            line_before=data.get("lineBefore"),
            line_after=data.get("lineAfter"),
        )


@dataclass
class Chunk:
    """A hunk of a text file."""

    from_file_range: FileRange
    to_file_range: FileRange
    changes: List[Change] = field(default_factory=list)
    context: Optional[str] = None

    type = "Chunk"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type}
        if self.context:
            data["context"] = self.context
        data["fromFileRange"] = self.from_file_range.to_dict()
        data["toFileRange"] = self.to_file_range.to_dict()
        data["changes"] = [change.to_dict() for change in self.changes]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Chunk":
        return cls(
            from_file_range=FileRange.from_dict(data["fromFileRange"]),
            to_file_range=FileRange.from_dict(data["toFileRange"]),
            changes=[Change.from_dict(c) for c in data.get("changes", [])],
            context=data.get("context"),
        )


@dataclass
class BinaryFilesChunk:
    """Placeholder chunk for a binary file git does not render."""

    path_before: Optional[str]
    path_after: Optional[str]

    type = "BinaryFilesChunk"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "pathBefore": self.path_before,
            "pathAfter": self.path_after,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BinaryFilesChunk":
        return cls(path_before=data.get("pathBefore"), path_after=data.get("pathAfter"))


AnyChunk = Union[Chunk, BinaryFilesChunk]


def chunk_from_dict(data: Dict[str, Any]) -> AnyChunk:
    if data.get("type") == BinaryFilesChunk.type:
        return BinaryFilesChunk.from_dict(data)
    return Chunk.from_dict(data)


@dataclass
class DiffFile:
    """One file touched by the diff."""

    type: str
    chunks: List[AnyChunk] = field(default_factory=list)
    path: Optional[str] = None
    path_before: Optional[str] = None
    path_after: Optional[str] = None

    @property
    def display_path(self) -> str:
        return self.path or self.path_after or self.path_before or ""

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type}
        if self.type == RENAMED_FILE:
            data["pathBefore"] = self.path_before
            data["pathAfter"] = self.path_after
        else:
            data["path"] = self.path
        data["chunks"] = [chunk.to_dict() for chunk in self.chunks]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DiffFile":
        return cls(
            type=data["type"],
            chunks=[chunk_from_dict(c) for c in data.get("chunks", [])],
            path=data.get("path"),
            path_before=data.get("pathBefore"),
            path_after=data.get("pathAfter"),
        )


@dataclass
class GitDiff:
    """Parsed git diff: the files it touches, in diff order."""

    files: List[DiffFile] = field(default_factory=list)

    type = "GitDiff"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "files": [f.to_dict() for f in self.files]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GitDiff":
        return cls(files=[DiffFile.from_dict(f) for f in data.get("files", [])])


def _clean_path(name: Optional[str], prefix: str) -> Optional[str]:
    if not name or name == DEV_NULL:
        return None
    if name.startswith(prefix):
        return name[len(prefix):]
    return name


def _strip_newline(value: str) -> str:
    if value.endswith("\r\n"):
        return value[:-2]
    if value.endswith("\n"):
        return value[:-1]
    return value


def _convert_line(line) -> Change:
    content = _strip_newline(line.value)
    if line.line_type == NO_NEWLINE_MARKER:
        message = content.strip().lstrip(NO_NEWLINE_MARKER).strip()
        return Change(type=MESSAGE_LINE, content=message)
    if line.is_added:
        return Change(type=ADDED_LINE, content=content, line_after=line.target_line_no)
    if line.is_removed:
        return Change(type=DELETED_LINE, content=content, line_before=line.source_line_no)
    return Change(
        type=UNCHANGED_LINE,
        content=content,
        line_before=line.source_line_no,
        line_after=line.target_line_no,
    )


def _convert_hunk(hunk) -> Chunk:
    return Chunk(
        from_file_range=FileRange(hunk.source_start, hunk.source_length),
        to_file_range=FileRange(hunk.target_start, hunk.target_length),
        changes=[_convert_line(line) for line in hunk],
        context=hunk.section_header.strip() or None,
    )


def _convert_file(patched_file) -> DiffFile:
    path_before = _clean_path(patched_file.source_file, "a/")
    path_after = _clean_path(patched_file.target_file, "b/")

    if patched_file.is_binary_file:
        chunks: List[AnyChunk] = [BinaryFilesChunk(path_before, path_after)]
    else:
        chunks = [_convert_hunk(hunk) for hunk in patched_file]

    if patched_file.is_added_file:
        return DiffFile(type=ADDED_FILE, chunks=chunks, path=path_after)
    if patched_file.is_removed_file:
        return DiffFile(type=DELETED_FILE, chunks=chunks, path=path_before)
    if patched_file.is_rename:
        return DiffFile(
            type=RENAMED_FILE,
            chunks=chunks,
            path_before=path_before,
            path_after=path_after,
        )
    return DiffFile(type=CHANGED_FILE, chunks=chunks, path=path_after or path_before)


def parse_git_diff(raw_diff: str) -> GitDiff:
    """Parse unified git diff text into a GitDiff."""
    try:
        patch_set = PatchSet(raw_diff)
    except UnidiffParseError as e:
        raise DiffParseError(str(e)) from e

    diff = GitDiff(files=[_convert_file(patched_file) for patched_file in patch_set])
    logger.debug(
        "Parsed git diff",
        extra={"files": len(diff.files), "paths": [f.display_path for f in diff.files]},
    )
    return diff
