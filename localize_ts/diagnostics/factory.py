"""Diagnostics raised by the localization generator itself."""

from typing import TYPE_CHECKING, Optional, Sequence

from tree_sitter import Node

from localize_ts.diagnostics.model import (
    Diagnostic,
    DiagnosticCategory,
    DiagnosticRelatedInformation,
)

if TYPE_CHECKING:
    from localize_ts.syntax.source_file import SourceFile

# Fairly meaningless but reasonably unique number.
GENERATOR_DIAGNOSTIC_CODE = 2324
GENERATOR_DIAGNOSTIC_SOURCE = "localization-generate"


def create_diagnostic(
    file: "SourceFile",
    node: Node,
    message: str,
    related_information: Optional[Sequence[DiagnosticRelatedInformation]] = None,
) -> Diagnostic:
    """Create an error diagnostic spanning exactly ``node`` within ``file``.

    Raises:
        ValueError: If the node's span does not lie within ``file.text``.
    """
    start = file.get_start(node)
    length = file.get_width(node)
    if start < 0 or length < 0 or start + length > len(file.text):
        raise ValueError(
            f"Node span {start}..{start + length} is outside {file.file_name} "
            f"({len(file.text)} chars)"
        )
    return Diagnostic(
        file=file,
        start=start,
        length=length,
        message_text=message,
        category=DiagnosticCategory.Error,
        code=GENERATOR_DIAGNOSTIC_CODE,
        source=GENERATOR_DIAGNOSTIC_SOURCE,
        related_information=(
            tuple(related_information) if related_information is not None else None
        ),
    )


__all__ = ["create_diagnostic", "GENERATOR_DIAGNOSTIC_CODE", "GENERATOR_DIAGNOSTIC_SOURCE"]
