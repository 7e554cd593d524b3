"""
Host Service Ports - Templating and time-range facilities owned by the host.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable

from mongodb_datasource.core.domain.query import TimeRange

# A format is either a named host format ("glob", "regex", "pipe", ...) or a
# callable receiving the raw variable value and returning the text to inline.
Format = str | Callable[[Any], str] | None


class TemplateService(ABC):
    """
    Variable interpolation.

    Implementations may also provide ``get_adhoc_filters(datasource_name)``;
    callers must treat it as optional.
    """

    @abstractmethod
    def replace(
        self,
        text: str,
        scoped_vars: dict[str, Any] | None = None,
        fmt: Format = None,
    ) -> str:
        """
        Substitute variable references in ``text``.

        Args:
            text: Text containing references such as ``$var`` or ``{{var}}``
            scoped_vars: Panel-scoped overrides, ``{name: {"text", "value"}}``
            fmt: How multi-valued variables are rendered

        Returns:
            The interpolated text
        """
        ...


class TimeService(ABC):
    """Current dashboard time range."""

    @abstractmethod
    def time_range(self) -> TimeRange:
        ...
