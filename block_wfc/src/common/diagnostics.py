import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

"""Unified diagnostic collection for graph building and solving."""

LOGGER_NAME = "block_wfc"


class DiagnosticSeverity(Enum):
    """Severity levels for solver diagnostics."""

    DEBUG = "debug"  # Internal solver tracing
    INFO = "info"  # Progress messages for users
    WARNING = "warning"  # Issues that don't stop the solve
    ERROR = "error"  # Issues that end the solve


SEVERITY_ORDER = [
    DiagnosticSeverity.DEBUG,
    DiagnosticSeverity.INFO,
    DiagnosticSeverity.WARNING,
    DiagnosticSeverity.ERROR,
]

_LOGGING_LEVELS = {
    DiagnosticSeverity.DEBUG: logging.DEBUG,
    DiagnosticSeverity.INFO: logging.INFO,
    DiagnosticSeverity.WARNING: logging.WARNING,
    DiagnosticSeverity.ERROR: logging.ERROR,
}


@dataclass
class Diagnostic:
    """A single diagnostic message with context."""

    severity: DiagnosticSeverity
    message: str
    stage: str  # graph, solve, backtrack, cli
    node: Optional[int] = None
    payload: Optional[Any] = None


class SolverDiagnostics:
    """Central diagnostic collection for a solve run.

    Every record is kept (if at or above ``log_level``) and forwarded to the
    ``block_wfc`` logger so that the CLI's logging configuration applies.

    Usage:
        diagnostics = SolverDiagnostics(log_level="info")
        diagnostics.info("Seeded traversal", stage="solve", node=0)
        if diagnostics.has_errors():
            print(diagnostics.format_for_user())
    """

    def __init__(self, log_level: str = "warning", raise_errors: bool = False):
        self.diagnostics: List[Diagnostic] = []
        self.min_severity = self._parse_level(log_level)
        self.raise_errors = raise_errors
        self.logger = logging.getLogger(LOGGER_NAME)
        self._error_count = 0
        self._warning_count = 0
        self.default_stage = "unknown"

    @staticmethod
    def _parse_level(level: str) -> DiagnosticSeverity:
        try:
            return DiagnosticSeverity(level.lower())
        except ValueError:
            raise ValueError(f"Invalid log level: {level}") from None

    def debug(
        self,
        message: str,
        stage: Optional[str] = None,
        node: Optional[int] = None,
        payload: Optional[Any] = None,
    ) -> None:
        """Add a tracing message (kept only at debug level)."""
        self._add(DiagnosticSeverity.DEBUG, message, stage, node, payload)

    def info(
        self,
        message: str,
        stage: Optional[str] = None,
        node: Optional[int] = None,
        payload: Optional[Any] = None,
    ) -> None:
        """Add an informational message."""
        self._add(DiagnosticSeverity.INFO, message, stage, node, payload)

    def warning(
        self,
        message: str,
        stage: Optional[str] = None,
        node: Optional[int] = None,
        payload: Optional[Any] = None,
    ) -> None:
        """Add a warning (always counted, doesn't stop the solve)."""
        self._add(DiagnosticSeverity.WARNING, message, stage, node, payload)
        self._warning_count += 1

    def error(
        self,
        message: str,
        stage: Optional[str] = None,
        node: Optional[int] = None,
        payload: Optional[Any] = None,
    ) -> None:
        """Add an error. Raises ``WFCError`` when ``raise_errors`` is set."""
        self._add(DiagnosticSeverity.ERROR, message, stage, node, payload)
        self._error_count += 1
        if self.raise_errors:
            from block_wfc.src.wfc.errors import WFCError

            raise WFCError(message)

    def _add(
        self,
        severity: DiagnosticSeverity,
        message: str,
        stage: Optional[str],
        node: Optional[int],
        payload: Optional[Any],
    ) -> None:
        diag = Diagnostic(
            severity=severity,
            message=message,
            stage=stage or self.default_stage,
            node=node,
            payload=payload,
        )
        self.logger.log(_LOGGING_LEVELS[severity], self._format_diagnostic(diag))
        if SEVERITY_ORDER.index(severity) < SEVERITY_ORDER.index(self.min_severity):
            return
        self.diagnostics.append(diag)

    def has_errors(self) -> bool:
        """Check if any errors have been recorded."""
        return self._error_count > 0

    def error_count(self) -> int:
        return self._error_count

    def warning_count(self) -> int:
        return self._warning_count

    def get_messages(
        self, min_severity: DiagnosticSeverity = DiagnosticSeverity.WARNING
    ) -> List[str]:
        """Get formatted messages at or above the specified severity level."""
        threshold = SEVERITY_ORDER.index(min_severity)
        return [
            self._format_diagnostic(diag)
            for diag in self.diagnostics
            if SEVERITY_ORDER.index(diag.severity) >= threshold
        ]

    def _format_diagnostic(self, diag: Diagnostic) -> str:
        # Format: SEVERITY [stage:node]: message
        location = diag.stage
        if diag.node is not None:
            location = f"{location}:{diag.node}"
        return f"{diag.severity.value.upper()} [{location}]: {diag.message}"

    def format_for_user(self) -> str:
        """Format all kept diagnostics for user-friendly output."""
        if not self.diagnostics:
            return "No diagnostics."

        messages = self.get_messages(self.min_severity)
        summary = f"\nSolve summary: {self._error_count} error(s), {self._warning_count} warning(s)"
        return "\n".join(messages) + summary
