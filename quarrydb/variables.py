"""Typed placeholder substitution for SQL templates.

A template may contain placeholders shaped ``{type:name}``, for example::

    SELECT * FROM users WHERE user_id = {int:user_id} AND name = {string:name}

Each placeholder is replaced by a literal built from ``variables[name]``,
validated and formatted according to its type tag:

``int`` / ``double``
    The value must survive a text → number → text round trip unchanged.
    Floats are compared without a trailing ``.0``, so ``5.0`` is a valid
    ``int`` and renders ``5``; the string ``"5.0"`` is not.
``string``
    Must be encodable as UTF-8.  HTML-entity escaped, then escaped by the
    driver's ``sanitize`` function, then wrapped in single quotes.
``raw``
    Inserted unmodified; the caller asserts it is safe SQL.
``array_int`` / ``array_double`` / ``array_string``
    A sequence whose elements are handled as above and joined with ``", "``
    (suitable for ``IN (...)``).

``None`` always becomes ``NULL`` whatever the declared type.
"""
from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable, Mapping, Sequence
from enum import Enum
from typing import Any

from quarrydb.errors import TypeMismatchError, UndefinedVariableError, UnknownDataTypeError

logger = logging.getLogger(__name__)

#: ``{type:name}`` with both halves restricted to word characters.
PLACEHOLDER_PATTERN = re.compile(r"\{([A-Za-z0-9_]+):([A-Za-z0-9_]+)\}")

_HTML_ENTITIES = str.maketrans(
    {
        "&": "&amp;",
        '"': "&quot;",
        "'": "&#039;",
        "<": "&lt;",
        ">": "&gt;",
    }
)

Sanitizer = Callable[[str], str]


class DataType(str, Enum):
    """The closed set of placeholder type tags."""

    INT = "int"
    DOUBLE = "double"
    STRING = "string"
    RAW = "raw"
    ARRAY_INT = "array_int"
    ARRAY_DOUBLE = "array_double"
    ARRAY_STRING = "array_string"


def html_escape(value: str) -> str:
    """Escape ``& " ' < >`` as HTML entities (single quote as ``&#039;``)."""
    return value.translate(_HTML_ENTITIES)


def escape_quotes(value: str) -> str:
    """Standard SQL string escaping: double every single quote."""
    return value.replace("'", "''")


def format_double(value: float) -> str:
    """Render a float the way it reads as a number, without a trailing ``.0``."""
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


class VariableSubstituter:
    """Rewrites ``{type:name}`` placeholders into escaped SQL literals.

    Args:
        sanitize: Engine-specific string escaping, applied to ``string``
            values.  Defaults to SQL-standard quote doubling.
        escape_html: Apply HTML-entity escaping to ``string`` values before
            ``sanitize``.
    """

    def __init__(
        self,
        sanitize: Sanitizer | None = None,
        escape_html: bool = True,
    ) -> None:
        self._sanitize = sanitize or escape_quotes
        self._escape_html = escape_html
        self._handlers: dict[DataType, Callable[[str, Any], str]] = {
            DataType.INT: self._process_int,
            DataType.DOUBLE: self._process_double,
            DataType.STRING: self._process_string,
            DataType.RAW: self._process_raw,
            DataType.ARRAY_INT: self._array_of(self._process_int, "array of integers"),
            DataType.ARRAY_DOUBLE: self._array_of(self._process_double, "array of doubles"),
            DataType.ARRAY_STRING: self._array_of(self._process_string, "array of strings"),
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def substitute(self, template: str, variables: Mapping[str, Any] | None) -> str:
        """Return ``template`` with every placeholder replaced.

        All replacements are computed before any is applied, so the text
        produced for one placeholder is never re-scanned as another.

        Raises:
            UndefinedVariableError: A placeholder names a missing variable.
            UnknownDataTypeError: A placeholder uses an unknown type tag.
            TypeMismatchError: A value does not fit its declared type.
        """
        if not variables:
            return template

        replacements: dict[str, str] = {}
        for match in PLACEHOLDER_PATTERN.finditer(template):
            token = match.group(0)
            if token not in replacements:
                replacements[token] = self.replacement(
                    match.group(1), match.group(2), variables
                )

        if not replacements:
            return template

        logger.debug("Substituted %d placeholder(s)", len(replacements))
        return PLACEHOLDER_PATTERN.sub(lambda m: replacements[m.group(0)], template)

    def replacement(
        self,
        type_tag: str,
        name: str,
        variables: Mapping[str, Any],
    ) -> str:
        """Return the SQL literal for a single ``{type_tag:name}`` placeholder."""
        if name not in variables:
            raise UndefinedVariableError(name)

        try:
            data_type = DataType(type_tag)
        except ValueError:
            raise UnknownDataTypeError(type_tag) from None

        value = variables[name]
        if value is None:
            return "NULL"

        return self._handlers[data_type](name, value)

    # ------------------------------------------------------------------
    # Type handlers
    # ------------------------------------------------------------------

    @staticmethod
    def _process_int(name: str, value: Any) -> str:
        try:
            converted = int(value)
        except (TypeError, ValueError, OverflowError):
            raise TypeMismatchError(name, "integer", value) from None
        given = format_double(value) if isinstance(value, float) else str(value)
        if isinstance(value, bool) or given != str(converted):
            raise TypeMismatchError(name, "integer", value)
        return str(converted)

    @staticmethod
    def _process_double(name: str, value: Any) -> str:
        if isinstance(value, bool):
            raise TypeMismatchError(name, "double", value)
        try:
            converted = float(value)
        except (TypeError, ValueError):
            raise TypeMismatchError(name, "double", value) from None
        if not math.isfinite(converted):
            raise TypeMismatchError(name, "double", value)

        text = format_double(converted)
        given = format_double(value) if isinstance(value, float) else str(value)
        if given != text:
            raise TypeMismatchError(name, "double", value)
        return text

    def _process_string(self, name: str, value: Any) -> str:
        text = str(value)
        try:
            text.encode("utf-8")
        except UnicodeEncodeError:
            raise TypeMismatchError(name, "UTF-8 string", value) from None
        if self._escape_html:
            text = html_escape(text)
        return f"'{self._sanitize(text)}'"

    @staticmethod
    def _process_raw(name: str, value: Any) -> str:
        return str(value)

    @staticmethod
    def _array_of(
        element_handler: Callable[[str, Any], str],
        expected: str,
    ) -> Callable[[str, Any], str]:
        def handler(name: str, value: Any) -> str:
            if not isinstance(value, Sequence) or isinstance(value, (str, bytes)):
                raise TypeMismatchError(name, expected, value)
            return ", ".join(
                "NULL" if item is None else element_handler(name, item)
                for item in value
            )

        return handler


def replace_variables(
    template: str,
    variables: Mapping[str, Any] | None,
    sanitize: Sanitizer | None = None,
    escape_html: bool = True,
) -> str:
    """Substitute placeholders in ``template`` using a one-off substituter.

    Example::

        replace_variables("user_id IN ({array_int:ids})", {"ids": [1, 2, 3]})
        # -> "user_id IN (1, 2, 3)"
    """
    return VariableSubstituter(sanitize, escape_html).substitute(template, variables)
