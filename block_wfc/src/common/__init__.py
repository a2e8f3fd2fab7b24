"""Common utilities shared across the solver subpackages."""

from .diagnostics import SolverDiagnostics, DiagnosticSeverity, Diagnostic
from .constants import *

__all__ = [
    "SolverDiagnostics",
    "DiagnosticSeverity",
    "Diagnostic",
    # Configuration
    "SolverConfig",
    "DEFAULT_CONFIG",
    "DEFAULT_CELL_SIZE",
    "CONNECTION_ID_PREFIX",
    "ORIENTATION_COUNT",
    "PALETTE_NAMES",
]
