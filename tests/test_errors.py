"""
Tests for diagnostics and evaluation error kinds.
"""

from emlang import (
    SourceLocation, SourceSpan,
    Diagnostic, DiagnosticCollector, ErrorSeverity, EvalError,
    ArityError, IndexError as EmIndexError,
)
from emlang.errors import (
    error_arity, error_bad_index, error_call_depth, error_missing_receiver,
    error_not_indexable,
)


def span(line=3, col=5, end_col=9):
    return SourceSpan(SourceLocation(line, col), SourceLocation(line, end_col))


class TestDiagnostics:
    """Test diagnostic formatting and collection."""

    def test_format_with_span_and_hint(self):
        err = error_call_depth(4, "loop", span())
        text = err.diagnostic.format()
        assert text.startswith("3:5: error[E408]: Call depth limit of 4 exceeded while calling loop")
        assert "= hint:" in text

    def test_format_without_span(self):
        err = error_not_indexable("number")
        assert err.diagnostic.format() == "error[E404]: Type number isn't indexable"
        assert str(err) == err.diagnostic.format()

    def test_error_kinds(self):
        err = error_arity("Function", "f", 2, 0)
        assert isinstance(err, ArityError)
        assert isinstance(err, EvalError)
        assert err.code == "E403"
        assert isinstance(error_bad_index("-1"), EmIndexError)
        assert isinstance(error_missing_receiver("Method", "C.m"), ArityError)

    def test_to_json(self):
        data = error_bad_index("x", span()).diagnostic.to_json()
        assert data["code"] == "E404"
        assert data["severity"] == "error"
        assert data["range"]["start"] == {"line": 3, "column": 5}
        assert "range" not in error_bad_index("x").diagnostic.to_json()

    def test_collector(self):
        collector = DiagnosticCollector()
        assert not collector.has_errors
        collector.add_error(error_bad_index("x"))
        collector.add(Diagnostic("W401", "just a note", ErrorSeverity.WARNING))
        assert collector.error_count == 1
        assert collector.has_errors
        assert collector.format_all().endswith("1 error(s)")
        assert len(collector.to_json()["diagnostics"]) == 2
