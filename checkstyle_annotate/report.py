from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from xml.parsers import expat


@dataclass(frozen=True)
class ErrorEntry:
    severity: str
    line: str
    message: str


@dataclass(frozen=True)
class FileEntry:
    name: str
    errors: tuple[ErrorEntry, ...]


@dataclass(frozen=True)
class Report:
    files: tuple[FileEntry, ...]


class ReportFormatError(ValueError):
    def __init__(self, diagnostic: str, raw: bytes) -> None:
        super().__init__(diagnostic)
        self.diagnostic = diagnostic
        self.raw = raw


def diagnose(raw: bytes, err: ET.ParseError | None) -> str:
    if err is not None:
        message = expat.ErrorString(err.code).rstrip()
        line, col = err.position
        # expat counts columns from 0
        return f"Error: {message} on line {line}, column {col + 1}"
    if raw[:5].lower() != b"<?xml":
        return "Error: Expecting xml stream starting with a xml opening tag."
    return "Error: Unknown error. Expecting checkstyle formatted xml input."


def load_report(raw: bytes) -> Report:
    """
    Parse a Checkstyle XML document into a `Report`.

    Only well-formedness is checked; absent attributes become empty strings.
    Raises `ReportFormatError` with a classified diagnostic when the input
    cannot be parsed.
    """
    if not raw.strip():
        raise ReportFormatError(diagnose(raw, None), raw)
    try:
        root = ET.fromstring(raw)
    except ET.ParseError as e:
        raise ReportFormatError(diagnose(raw, e), raw) from e

    files: list[FileEntry] = []
    for file_elem in root.findall("file"):
        errors = tuple(
            ErrorEntry(
                severity=err.get("severity", ""),
                line=err.get("line", ""),
                message=err.get("message", ""),
            )
            for err in file_elem.findall("error")
        )
        files.append(FileEntry(name=file_elem.get("name", ""), errors=errors))

    return Report(files=tuple(files))
