from __future__ import annotations

import argparse
import io
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from . import __version__
from .engine import annotate_report
from .report import ReportFormatError, load_report
from .types import ExitCode, Options


DEFAULT_PROG = "checkstyle-annotate"


class InvocationError(Exception):
    pass


class UnknownOptionError(InvocationError):
    def __init__(self, option: str) -> None:
        super().__init__(f"Unknown option {option}")
        self.option = option


class UsageError(InvocationError):
    pass


@dataclass(frozen=True)
class Invocation:
    options: Options
    params: tuple[str, ...]

    @property
    def prog(self) -> str:
        return self.params[0] if self.params else DEFAULT_PROG


class _OptionParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)


def _prefix_value(raw: str) -> str:
    value = raw[1:] if raw.startswith('"') else raw
    value = value[:-1] if value.endswith('"') else value
    if not value:
        raise argparse.ArgumentTypeError("prefix must not be empty")
    return value + " "


def _build_option_parser() -> argparse.ArgumentParser:
    p = _OptionParser(prog=DEFAULT_PROG, add_help=False, allow_abbrev=False)
    p.add_argument(
        "--graceful-warnings",
        dest="graceful_warnings",
        action="store_true",
        help="Don't exit with error codes if there are only warnings.",
    )
    p.add_argument(
        "--colorize",
        action="store_true",
        help="Colorize the output (still compatible with Github Annotations)",
    )
    p.add_argument(
        "--prefix",
        dest="message_prefix",
        type=_prefix_value,
        default=None,
        help="Prefix every annotation message with the given text.",
    )
    return p


def parse_invocation(argv: list[str]) -> Invocation:
    """
    Split `argv` (program name included) into options and positional params.

    Every token starting with "--" is an option. Options are handed to argparse
    one at a time so a rejected token can be reported verbatim.
    """
    parser = _build_option_parser()
    ns = argparse.Namespace()
    params: list[str] = []

    for token in argv:
        if not token.startswith("--"):
            params.append(token)
            continue
        if token == "--":
            raise UnknownOptionError("")
        try:
            ns, extra = parser.parse_known_args([token], namespace=ns)
        except UsageError:
            extra = [token]
        if extra:
            raise UnknownOptionError(token[2:])

    options = Options(
        colorize=bool(getattr(ns, "colorize", False)),
        graceful_warnings=bool(getattr(ns, "graceful_warnings", False)),
        message_prefix=getattr(ns, "message_prefix", None) or "",
    )
    return Invocation(options=options, params=tuple(params))


def resolve_source(invocation: Invocation) -> Path | None:
    """Return the report file to read, or None for standard input."""
    params = invocation.params
    if len(params) == 1:
        return None
    if len(params) == 2 and Path(params[1]).is_file():
        return Path(params[1])
    raise UsageError(f"expected at most one existing report file, got {params[1:]!r}")


def usage_text(prog: str) -> str:
    return (
        f"{DEFAULT_PROG} {__version__}\n"
        "Annotate a Github Pull Request based on a Checkstyle XML-report.\n"
        f"Usage: {prog} [OPTION]... <filename>\n"
        "\n"
        "Supported options:\n"
        "  --graceful-warnings   Don't exit with error codes if there are only warnings.\n"
        "  --colorize            Colorize the output (still compatible with Github Annotations)\n"
        '  --prefix="text"       Prefix every annotation message with the given text.\n'
    )


def _use_utf8(stream: TextIO) -> None:
    # Workflow commands are UTF-8 regardless of the console code page.
    if isinstance(stream, io.TextIOWrapper):
        stream.reconfigure(encoding="utf-8")


def _echo_raw(stream: TextIO, raw: bytes) -> None:
    if isinstance(stream, io.TextIOWrapper):
        stream.flush()
        stream.buffer.write(raw)
        stream.buffer.flush()
    else:
        stream.write(raw.decode("utf-8", errors="replace"))


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv if argv is None else argv)
    _use_utf8(sys.stdout)

    try:
        invocation = parse_invocation(args)
    except UnknownOptionError as e:
        sys.stdout.write(f"Unknown option {e.option}\n")
        return int(ExitCode.USAGE)

    try:
        source = resolve_source(invocation)
    except UsageError:
        sys.stdout.write(usage_text(invocation.prog))
        return int(ExitCode.USAGE)

    raw = sys.stdin.buffer.read() if source is None else source.read_bytes()

    try:
        report = load_report(raw)
    except ReportFormatError as e:
        sys.stderr.write(f"{e.diagnostic}\n\n")
        _echo_raw(sys.stderr, e.raw)
        return int(ExitCode.MALFORMED_INPUT)

    return annotate_report(report, invocation.options, sys.stdout)


if __name__ == "__main__":
    raise SystemExit(main())
