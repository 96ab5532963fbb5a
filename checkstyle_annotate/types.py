from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    FINDINGS = 1
    MALFORMED_INPUT = 2
    USAGE = 9


class AnnotationKind(Enum):
    ERROR = "error"
    WARNING = "warning"
    NOTICE = "notice"


@dataclass(frozen=True)
class Options:
    colorize: bool = False
    graceful_warnings: bool = False
    message_prefix: str = ""


@dataclass(frozen=True)
class Annotation:
    kind: AnnotationKind
    file: str
    line: str
    message: str

    def render(self) -> str:
        return f"::{self.kind.value} file={self.file},line={self.line}::{self.message}\n"
