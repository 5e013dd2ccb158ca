"""
Name: Extraction diagnostics.
Description: Non-fatal diagnostic channel for the extraction pipeline. Components report anomalies (malformed extension values, unresolved references, schema cycles, filter failures) to an injectable sink instead of aborting extraction.
"""

import logging
from typing import Any, Callable, List, Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)

INVALID_EXTENSION = "invalid_extension"
FILTER_ERROR = "filter_error"
UNRESOLVED_REF = "unresolved_ref"
SCHEMA_CYCLE = "schema_cycle"
INVALID_SCHEMA = "invalid_schema"


class Diagnostic(BaseModel):
    """A single non-fatal anomaly found while extracting tools."""

    code: str
    message: str
    location: Optional[str] = None
    value: Any = None

    def __str__(self) -> str:
        if self.location:
            return f"[{self.code}] {self.location}: {self.message}"
        return f"[{self.code}] {self.message}"


DiagnosticSink = Callable[[Diagnostic], None]


def log_diagnostic(diagnostic: Diagnostic) -> None:
    """Default sink: report the diagnostic as a logging warning."""
    logger.warning(str(diagnostic))


def report(
    sink: Optional[DiagnosticSink],
    code: str,
    message: str,
    location: Optional[str] = None,
    value: Any = None,
) -> Diagnostic:
    """Build a diagnostic and hand it to the sink (or the default sink).

    Args:
        sink: Sink to report to, ``None`` for the logging sink
        code: Diagnostic code
        message: Human readable message
        location: Where in the document the anomaly was found
        value: The offending raw value, if any

    Returns:
        The reported diagnostic
    """
    diagnostic = Diagnostic(code=code, message=message, location=location, value=value)
    (sink or log_diagnostic)(diagnostic)
    return diagnostic


class DiagnosticCollector:
    """Sink that keeps every diagnostic it receives.

    Optionally forwards each diagnostic to another sink, e.g.
    ``DiagnosticCollector(forward_to=log_diagnostic)`` to both log and keep them.
    """

    def __init__(self, forward_to: Optional[DiagnosticSink] = None):
        self.diagnostics: List[Diagnostic] = []
        self.forward_to = forward_to

    def __call__(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)
        if self.forward_to:
            self.forward_to(diagnostic)

    def __len__(self) -> int:
        return len(self.diagnostics)

    def codes(self) -> List[str]:
        return [d.code for d in self.diagnostics]

    def by_code(self, code: str) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.code == code]

    def clear(self) -> None:
        self.diagnostics.clear()
