"""Dialect settings controlling placeholder style and identifier quoting.

A :class:`Dialect` is an immutable value. The process-wide default lives in
:data:`registry`; :func:`set_option` swaps it for a new value, so a dialect
captured with :func:`get_dialect` is a snapshot that later option changes do
not touch. Every statement rendered without an explicit dialect reads the
registry at ``build()`` time, which makes the registry shared mutable state for
the whole process.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional, Union

from sqlglot.dialects.dialect import Dialect as SQLGlotDialect

from sqlbricks.exceptions import UnsupportedOptionError
from sqlbricks.utils.logging import get_logger

__all__ = (
    "DEFAULT_DIALECT",
    "Dialect",
    "DialectRegistry",
    "ParameterStyle",
    "get_dialect",
    "get_option",
    "registry",
    "reset_options",
    "set_option",
)

logger = get_logger("dialect")


class ParameterStyle(str, Enum):
    """Positional parameter styles.

    Supported parameter styles:
    - QMARK: ? placeholders
    - NUMERIC: $1, $2 placeholders
    - POSITIONAL_COLON: :1, :2 placeholders
    - POSITIONAL_PYFORMAT: %s placeholders
    """

    QMARK = "qmark"
    NUMERIC = "numeric"
    POSITIONAL_COLON = "positional_colon"
    POSITIONAL_PYFORMAT = "pyformat_positional"

    @property
    def is_numbered(self) -> bool:
        return self in {ParameterStyle.NUMERIC, ParameterStyle.POSITIONAL_COLON}

    @property
    def token(self) -> str:
        """The short form accepted by ``set_option("placeholder", ...)``."""
        return _STYLE_TOKENS[self]


_STYLE_TOKENS: "dict[ParameterStyle, str]" = {
    ParameterStyle.NUMERIC: "$",
    ParameterStyle.QMARK: "?",
    ParameterStyle.POSITIONAL_COLON: ":",
    ParameterStyle.POSITIONAL_PYFORMAT: "%s",
}
_TOKEN_STYLES: "dict[str, ParameterStyle]" = {token: style for style, token in _STYLE_TOKENS.items()}

# Closing characters for quote pairs that are not symmetric.
_QUOTE_PAIRS = {"[": "]"}

# Driver parameter style by sqlglot dialect name; unlisted dialects use qmark.
_DIALECT_PARAMETER_STYLES: "dict[str, ParameterStyle]" = {
    "postgres": ParameterStyle.NUMERIC,
    "redshift": ParameterStyle.NUMERIC,
    "materialize": ParameterStyle.NUMERIC,
    "risingwave": ParameterStyle.NUMERIC,
    "oracle": ParameterStyle.POSITIONAL_COLON,
}

_OPTION_NAMES = {
    "placeholder": "placeholder",
    "quoteChar": "quote_char",
    "quote_char": "quote_char",
    "dialect": "dialect",
    "parameterizeLimits": "parameterize_limits",
    "parameterize_limits": "parameterize_limits",
}


def _normalize_option_name(name: Any) -> str:
    if not isinstance(name, str) or name not in _OPTION_NAMES:
        msg = f"Unknown dialect option: {name!r}. Expected one of: {', '.join(sorted(set(_OPTION_NAMES)))}"
        raise UnsupportedOptionError(msg)
    return _OPTION_NAMES[name]


def _parse_parameter_style(value: Any) -> ParameterStyle:
    if isinstance(value, ParameterStyle):
        return value
    if isinstance(value, str):
        if value in _TOKEN_STYLES:
            return _TOKEN_STYLES[value]
        try:
            return ParameterStyle(value)
        except ValueError:
            pass
    msg = f"Unsupported placeholder style: {value!r}. Expected one of: {', '.join(_TOKEN_STYLES)}"
    raise UnsupportedOptionError(msg)


def _parse_quote_char(value: Any) -> "tuple[Optional[str], Optional[str]]":
    if value is None or value == "":
        return None, None
    if not isinstance(value, str) or len(value) != 1 or value.isalnum() or value.isspace() or value == "_":
        msg = f"Unsupported quote character: {value!r}. Expected a single punctuation character or None"
        raise UnsupportedOptionError(msg)
    return value, _QUOTE_PAIRS.get(value, value)


def _parse_bool(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        msg = f"Option {name!r} expects a bool, got {value!r}"
        raise UnsupportedOptionError(msg)
    return value


@dataclass(frozen=True)
class Dialect:
    """Placeholder and identifier-quoting settings used by the renderer."""

    parameter_style: ParameterStyle = ParameterStyle.NUMERIC
    quote_char: Optional[str] = None
    quote_end: Optional[str] = None
    parameterize_limits: bool = False
    name: Optional[str] = None

    @classmethod
    def from_name(cls, dialect_name: str) -> "Dialect":
        """Build a dialect from a sqlglot dialect name.

        Identifier quotes come from sqlglot's dialect definition; the parameter
        style is the one the usual drivers for that database expect.

        Args:
            dialect_name: Any name sqlglot recognizes, e.g. ``"postgres"`` or ``"mysql"``.

        Raises:
            UnsupportedOptionError: If sqlglot does not know the dialect.

        Returns:
            A new dialect value.
        """
        if not isinstance(dialect_name, str) or not dialect_name.strip():
            msg = f"Unsupported dialect name: {dialect_name!r}"
            raise UnsupportedOptionError(msg)
        try:
            glot_dialect = SQLGlotDialect.get_or_raise(dialect_name)
        except ValueError as e:
            msg = f"Unsupported dialect name: {dialect_name!r}"
            raise UnsupportedOptionError(msg) from e

        name = dialect_name.split(",", 1)[0].strip().lower()
        return cls(
            parameter_style=_DIALECT_PARAMETER_STYLES.get(name, ParameterStyle.QMARK),
            quote_char=glot_dialect.IDENTIFIER_START,
            quote_end=glot_dialect.IDENTIFIER_END,
            name=name,
        )

    def placeholder(self, index: int) -> str:
        """Return the placeholder token for the ``index``-th bound value (1-based)."""
        if self.parameter_style is ParameterStyle.NUMERIC:
            return f"${index}"
        if self.parameter_style is ParameterStyle.POSITIONAL_COLON:
            return f":{index}"
        return self.parameter_style.token

    def quote(self, segment: str) -> str:
        """Quote a single identifier segment, doubling any embedded closing quote."""
        if self.quote_char is None:
            return segment
        end = self.quote_end or self.quote_char
        return f"{self.quote_char}{segment.replace(end, end * 2)}{end}"

    def with_option(self, name: str, value: Any) -> "Dialect":
        """Return a copy of this dialect with one option changed.

        Args:
            name: ``placeholder``, ``quoteChar``, ``dialect`` or ``parameterizeLimits``
                (snake_case spellings are accepted too).
            value: The new value for the option.

        Raises:
            UnsupportedOptionError: If the name or value is not recognized.

        Returns:
            A new dialect; ``self`` is left unchanged.
        """
        option = _normalize_option_name(name)
        if option == "placeholder":
            return replace(self, parameter_style=_parse_parameter_style(value))
        if option == "quote_char":
            quote_char, quote_end = _parse_quote_char(value)
            return replace(self, quote_char=quote_char, quote_end=quote_end)
        if option == "parameterize_limits":
            return replace(self, parameterize_limits=_parse_bool(name, value))
        named = Dialect.from_name(value)
        return replace(named, parameterize_limits=self.parameterize_limits)

    def get_option(self, name: str) -> Any:
        """Read an option back in the form ``set_option`` accepts."""
        option = _normalize_option_name(name)
        if option == "placeholder":
            return self.parameter_style.token
        if option == "quote_char":
            return self.quote_char
        if option == "parameterize_limits":
            return self.parameterize_limits
        return self.name


DEFAULT_DIALECT = Dialect()


class DialectRegistry:
    """Holder for the process-wide default dialect."""

    __slots__ = ("_current",)

    def __init__(self, dialect: Dialect = DEFAULT_DIALECT) -> None:
        self._current = dialect

    @property
    def current(self) -> Dialect:
        return self._current

    def set_option(self, name: str, value: Any) -> None:
        # with_option validates before anything is swapped in
        self._current = self._current.with_option(name, value)
        logger.debug("Dialect option %s set to %r", name, value)

    def use(self, dialect: Union[Dialect, str]) -> None:
        """Install a whole dialect, or a sqlglot dialect name, as the default."""
        self._current = Dialect.from_name(dialect) if isinstance(dialect, str) else dialect
        logger.debug("Dialect replaced with %r", self._current)

    def reset(self) -> None:
        self._current = DEFAULT_DIALECT
        logger.debug("Dialect reset to defaults")


registry = DialectRegistry()


def get_dialect() -> Dialect:
    """Return the current process-wide dialect.

    The returned value is immutable, so holding on to it gives a snapshot that
    later :func:`set_option` calls do not affect.
    """
    return registry.current


def set_option(name: str, value: Any) -> None:
    """Change one option of the process-wide dialect.

    Affects every statement rendered afterwards without an explicit dialect,
    including statements built before the call.

    Raises:
        UnsupportedOptionError: If the name or value is not recognized. The
            current dialect is left as it was.
    """
    registry.set_option(name, value)


def get_option(name: str) -> Any:
    return registry.current.get_option(name)


def reset_options() -> None:
    """Restore the built-in defaults: ``$1`` placeholders, unquoted identifiers."""
    registry.reset()
