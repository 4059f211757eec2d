import pytest

from sqlbricks import in_, set_option
from sqlbricks.exceptions import MalformedClauseError, SQLBricksError, UnsupportedOptionError


def test_exception_hierarchy():
    """Both error kinds share the library base class."""
    assert issubclass(MalformedClauseError, SQLBricksError)
    assert issubclass(UnsupportedOptionError, SQLBricksError)
    assert not issubclass(MalformedClauseError, UnsupportedOptionError)


def test_exception_messages():
    """Messages surface through str() and the detail attribute."""
    exc = MalformedClauseError("IN clause is empty")
    assert str(exc) == "IN clause is empty"
    assert exc.detail == "IN clause is empty"
    assert repr(exc) == "MalformedClauseError - IN clause is empty"


def test_default_messages():
    assert str(MalformedClauseError()) == "Malformed SQL clause."
    assert str(UnsupportedOptionError()) == "Unsupported dialect option."


def test_errors_are_raised_to_the_caller():
    with pytest.raises(SQLBricksError):
        in_("id", [])
    with pytest.raises(SQLBricksError):
        set_option("nope", 1)


def test_exception_chaining():
    """Dialect lookups chain the underlying sqlglot error."""
    with pytest.raises(UnsupportedOptionError) as exc_info:
        set_option("dialect", "definitely_not_sql")
    assert isinstance(exc_info.value.__cause__, ValueError)
