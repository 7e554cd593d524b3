"""
In-process TemplateService for running the adapter outside a dashboard host.

Supports the host's reference syntaxes: ``$var``, ``${var}``, ``${var:fmt}``,
``[[var]]``, ``[[var:fmt]]`` and ``{{var}}``. Unknown names are left in place,
so backend macros such as ``"$from"`` survive interpolation.
"""

import re
from typing import Any

from pydantic import BaseModel, Field

from mongodb_datasource.core.ports.host_services import Format, TemplateService

ALL_VALUE = "$__all"

VARIABLE_PATTERN = re.compile(
    r"\$\{(\w+)(?::(\w+))?\}"
    r"|\[\[(\w+)(?::(\w+))?\]\]"
    r"|\{\{\s*(\w+)\s*\}\}"
    r"|\$(\w+)"
)


class Variable(BaseModel):
    """A dashboard template variable."""

    name: str
    current: Any = None
    options: list[Any] = Field(default_factory=list)

    def resolved(self) -> Any:
        """Current value with "include all" expanded to every option."""
        if self.current == ALL_VALUE or self.current == [ALL_VALUE]:
            return list(self.options)
        return self.current


def format_value(value: Any, fmt: Format = None) -> str:
    if callable(fmt):
        return fmt(value)

    values = list(value) if isinstance(value, (list, tuple)) else [value]
    if fmt == "glob":
        if len(values) == 1:
            return str(values[0])
        return "{" + ",".join(str(v) for v in values) + "}"
    if fmt == "regex":
        escaped = [re.escape(str(v)) for v in values]
        return escaped[0] if len(escaped) == 1 else "(" + "|".join(escaped) + ")"
    if fmt == "pipe":
        return "|".join(str(v) for v in values)
    return ",".join(str(v) for v in values)


class VariableTemplateService(TemplateService):
    """
    Interpolates a fixed set of variables and ad-hoc filters.
    """

    def __init__(
        self,
        variables: list[Variable] | None = None,
        adhoc_filters: dict[str, list[dict[str, Any]]] | None = None,
    ):
        self.variables = {v.name: v for v in variables or []}
        self.adhoc_filters = adhoc_filters or {}

    def _lookup(self, name: str, scoped_vars: dict[str, Any] | None) -> tuple[bool, Any]:
        if scoped_vars and name in scoped_vars:
            scoped = scoped_vars[name]
            return True, scoped.get("value") if isinstance(scoped, dict) else scoped
        if name in self.variables:
            return True, self.variables[name].resolved()
        return False, None

    def replace(
        self,
        text: str,
        scoped_vars: dict[str, Any] | None = None,
        fmt: Format = None,
    ) -> str:
        if not text:
            return text

        def substitute(match: re.Match) -> str:
            name = match.group(1) or match.group(3) or match.group(5) or match.group(6)
            inline_fmt = match.group(2) or match.group(4)
            found, value = self._lookup(name, scoped_vars)
            if not found:
                return match.group(0)
            return format_value(value, inline_fmt or fmt)

        return VARIABLE_PATTERN.sub(substitute, text)

    def get_adhoc_filters(self, datasource_name: str) -> list[dict[str, Any]]:
        return list(self.adhoc_filters.get(datasource_name, []))
