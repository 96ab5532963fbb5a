from __future__ import annotations

import os
from typing import Iterable, TextIO

from .report import Report
from .types import Annotation, AnnotationKind, ExitCode, Options


_ERROR_SEVERITIES = {"error", "failure"}
_NOTICE_SEVERITIES = {"info", "notice"}

COLOR_ERROR = "\033[91m"
COLOR_OTHER = "\033[93m"
COLOR_RESET = "\033[0m"


def annotation_kind(severity: str) -> AnnotationKind:
    if severity in _ERROR_SEVERITIES:
        return AnnotationKind.ERROR
    if severity in _NOTICE_SEVERITIES:
        return AnnotationKind.NOTICE
    return AnnotationKind.WARNING


def relative_path(path: str, cwd: str | None = None) -> str:
    base = (os.getcwd() if cwd is None else cwd) + "/"
    if path.startswith(base):
        return path[len(base) :]
    return path


def escape_message(message: str) -> str:
    # Workflow commands are single-line; newlines must be URL-encoded.
    return message.replace("\n", "%0A")


def iter_annotations(
    report: Report, options: Options, *, cwd: str | None = None
) -> Iterable[Annotation]:
    for file_entry in report.files:
        filename = relative_path(file_entry.name, cwd)
        for err in file_entry.errors:
            yield Annotation(
                kind=annotation_kind(err.severity),
                file=filename,
                line=err.line,
                message=escape_message(options.message_prefix + err.message),
            )


def is_forcing(annotation: Annotation, options: Options) -> bool:
    return not options.graceful_warnings or annotation.kind is AnnotationKind.ERROR


def write_annotation(annotation: Annotation, out: TextIO, *, colorize: bool = False) -> None:
    if colorize:
        color = COLOR_ERROR if annotation.kind is AnnotationKind.ERROR else COLOR_OTHER
        out.write(f"{color}\n")
    out.write(annotation.render())
    if colorize:
        out.write(COLOR_RESET)


def annotate_report(
    report: Report, options: Options, out: TextIO, *, cwd: str | None = None
) -> int:
    """Write one directive per finding to `out` and return the exit code."""
    exit_code = ExitCode.SUCCESS
    for annotation in iter_annotations(report, options, cwd=cwd):
        write_annotation(annotation, out, colorize=options.colorize)
        if is_forcing(annotation, options):
            exit_code = ExitCode.FINDINGS
    return int(exit_code)
