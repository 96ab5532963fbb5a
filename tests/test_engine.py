import io
import unittest

from checkstyle_annotate.engine import (
    annotate_report,
    annotation_kind,
    escape_message,
    iter_annotations,
    relative_path,
)
from checkstyle_annotate.report import ErrorEntry, FileEntry, Report
from checkstyle_annotate.types import Annotation, AnnotationKind, Options


def _report(*severities: str) -> Report:
    errors = tuple(ErrorEntry(severity=s, line=str(i + 1), message=f"m{i}") for i, s in enumerate(severities))
    return Report(files=(FileEntry(name="/repo/src/a.php", errors=errors),))


class TestAnnotationKind(unittest.TestCase):
    def test_mapping(self):
        cases = {
            "error": AnnotationKind.ERROR,
            "failure": AnnotationKind.ERROR,
            "info": AnnotationKind.NOTICE,
            "notice": AnnotationKind.NOTICE,
            "warning": AnnotationKind.WARNING,
            "": AnnotationKind.WARNING,
            "ERROR": AnnotationKind.WARNING,
            "fatal": AnnotationKind.WARNING,
        }
        for severity, kind in cases.items():
            with self.subTest(severity=severity):
                self.assertIs(annotation_kind(severity), kind)


class TestFormatting(unittest.TestCase):
    def test_relative_path_strips_cwd_once(self):
        self.assertEqual(relative_path("/repo/src/a.php", "/repo"), "src/a.php")
        self.assertEqual(relative_path("/repo/repo/a.php", "/repo"), "repo/a.php")
        self.assertEqual(relative_path("src/a.php", "/repo"), "src/a.php")
        self.assertEqual(relative_path("/other/repo/a.php", "/repo"), "/other/repo/a.php")

    def test_escape_message(self):
        self.assertEqual(escape_message("a\nb\n"), "a%0Ab%0A")
        self.assertEqual(escape_message("50% done\r\t"), "50% done\r\t")

    def test_render(self):
        a = Annotation(kind=AnnotationKind.NOTICE, file="x.py", line="", message="hi")
        self.assertEqual(a.render(), "::notice file=x.py,line=::hi\n")

    def test_iter_annotations_applies_prefix_before_escaping(self):
        report = Report(
            files=(FileEntry(name="/repo/a.py", errors=(ErrorEntry("error", "4", "one\ntwo"),)),)
        )
        out = list(iter_annotations(report, Options(message_prefix="PHPStan: "), cwd="/repo"))
        self.assertEqual(
            out,
            [Annotation(kind=AnnotationKind.ERROR, file="a.py", line="4", message="PHPStan: one%0Atwo")],
        )


class TestAnnotateReport(unittest.TestCase):
    def test_empty_report_succeeds_silently(self):
        out = io.StringIO()
        self.assertEqual(annotate_report(Report(files=()), Options(), out, cwd="/repo"), 0)
        self.assertEqual(out.getvalue(), "")

    def test_errors_always_fail(self):
        for graceful in (False, True):
            with self.subTest(graceful=graceful):
                out = io.StringIO()
                code = annotate_report(
                    _report("warning", "error"), Options(graceful_warnings=graceful), out, cwd="/repo"
                )
                self.assertEqual(code, 1)

    def test_warnings_fail_unless_graceful(self):
        out = io.StringIO()
        self.assertEqual(annotate_report(_report("warning", "info"), Options(), out, cwd="/repo"), 1)
        self.assertEqual(
            annotate_report(_report("warning", "info"), Options(graceful_warnings=True), out, cwd="/repo"),
            0,
        )

    def test_output_lines_in_document_order(self):
        out = io.StringIO()
        annotate_report(_report("error", "warning", "notice"), Options(), out, cwd="/repo")
        self.assertEqual(
            out.getvalue().splitlines(),
            [
                "::error file=src/a.php,line=1::m0",
                "::warning file=src/a.php,line=2::m1",
                "::notice file=src/a.php,line=3::m2",
            ],
        )

    def test_colorize_wraps_each_line(self):
        out = io.StringIO()
        annotate_report(_report("failure", "warning"), Options(colorize=True), out, cwd="/repo")
        self.assertEqual(
            out.getvalue(),
            "\033[91m\n::error file=src/a.php,line=1::m0\n\033[0m"
            "\033[93m\n::warning file=src/a.php,line=2::m1\n\033[0m",
        )


if __name__ == "__main__":
    unittest.main()
