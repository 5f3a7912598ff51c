"""
Structured diagnostics collected during a conversion pass.

Soft skips, data-loss coercions and per-entity failures caught by a batch
driver are recorded here instead of aborting the whole conversion.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    """How serious a diagnostic is."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


_LOG_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.WARNING,  # the batch continues, so this is not a logged error
}

SKIPPED_REFERENCE_SCHEMA = "skipped-reference-schema"
SKIPPED_ONE_OF = "skipped-one-of"
SKIPPED_PATCH = "skipped-patch"
SKIPPED_METHOD = "skipped-method"
DROPPED_ENUM_VALUE = "dropped-enum-value"
CONVERSION_FAILED = "conversion-failed"
UNRESOLVED_REFERENCE = "unresolved-reference"


@dataclass(frozen=True)
class Diagnostic:
    """A single recorded event of a conversion pass."""

    severity: Severity
    code: str
    message: str
    location: str = ""

    def __str__(self) -> str:
        where = f" [{self.location}]" if self.location else ""
        return f"{self.severity.value}: {self.code}: {self.message}{where}"


class Diagnostics:
    """Ordered collector of diagnostics."""

    def __init__(self, items: Iterable[Diagnostic] = ()):
        self._items: list[Diagnostic] = list(items)

    def add(self, diagnostic: Diagnostic) -> Diagnostic:
        logger.log(_LOG_LEVELS[diagnostic.severity], "%s", diagnostic)
        self._items.append(diagnostic)
        return diagnostic

    def info(self, code: str, message: str, location: str = "") -> Diagnostic:
        return self.add(Diagnostic(Severity.INFO, code, message, location))

    def warning(self, code: str, message: str, location: str = "") -> Diagnostic:
        return self.add(Diagnostic(Severity.WARNING, code, message, location))

    def error(self, code: str, message: str, location: str = "") -> Diagnostic:
        return self.add(Diagnostic(Severity.ERROR, code, message, location))

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        # Already logged by whoever created them
        self._items.extend(diagnostics)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self._items if d.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self._items if d.severity is Severity.WARNING]

    @property
    def has_errors(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self._items)

    def with_code(self, code: str) -> list[Diagnostic]:
        return [d for d in self._items if d.code == code]

    def freeze(self) -> tuple[Diagnostic, ...]:
        return tuple(self._items)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)
