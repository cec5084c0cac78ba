"""Diagnostic records, generator-raised diagnostics and their presentation."""

from .factory import create_diagnostic
from .formatter import FormatDiagnosticsHost, print_diagnostics, stringify_diagnostics
from .model import (
    Diagnostic,
    DiagnosticCategory,
    DiagnosticMessageChain,
    DiagnosticRelatedInformation,
)

__all__ = [
    "create_diagnostic",
    "FormatDiagnosticsHost",
    "print_diagnostics",
    "stringify_diagnostics",
    "Diagnostic",
    "DiagnosticCategory",
    "DiagnosticMessageChain",
    "DiagnosticRelatedInformation",
]
