from typing import Any, Optional

__all__ = (
    "MalformedClauseError",
    "SQLBricksError",
    "UnsupportedOptionError",
)


class SQLBricksError(Exception):
    """Base exception class from which all sqlbricks exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLBricksError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class MalformedClauseError(SQLBricksError):
    """A clause was given arguments that cannot produce valid SQL."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Malformed SQL clause."
        super().__init__(message)


class UnsupportedOptionError(SQLBricksError):
    """An unknown dialect option, or an invalid value for a known one."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Unsupported dialect option."
        super().__init__(message)
