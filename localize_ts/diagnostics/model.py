"""Diagnostic records in the compiler's shape.

A ``Diagnostic`` ties a message to a span of a ``SourceFile``; global
diagnostics (configuration problems) carry no file. Records are immutable and
serialize to the same JSON keys the compiler uses.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple, Union

if TYPE_CHECKING:
    from localize_ts.diagnostics.messages import DiagnosticMessage
    from localize_ts.syntax.source_file import SourceFile


class DiagnosticCategory(IntEnum):
    """Severity, numbered as in the compiler."""

    Warning = 0
    Error = 1
    Suggestion = 2
    Message = 3

    @property
    def display_name(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class DiagnosticMessageChain:
    """A message with nested elaborations, flattened with indentation."""

    message_text: str
    category: DiagnosticCategory
    code: int
    next: Optional[Tuple["DiagnosticMessageChain", ...]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "messageText": self.message_text,
            "category": int(self.category),
            "code": self.code,
        }
        if self.next:
            data["next"] = [chain.to_dict() for chain in self.next]
        return data


MessageText = Union[str, DiagnosticMessageChain]


@dataclass(frozen=True)
class DiagnosticRelatedInformation:
    """Secondary location attached to a diagnostic."""

    file: Optional["SourceFile"]
    start: Optional[int]
    length: Optional[int]
    message_text: MessageText
    category: DiagnosticCategory = DiagnosticCategory.Message
    code: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return _serialize(self)


@dataclass(frozen=True)
class Diagnostic(DiagnosticRelatedInformation):
    """A single error, warning or message, optionally tied to a source span.

    Attributes:
        file: Source file the span refers to, or None for global diagnostics.
        start: Character offset of the span in ``file.text``.
        length: Character length of the span.
        message_text: Message string or message chain.
        category: Severity.
        code: Numeric diagnostic code.
        source: Tool that raised the diagnostic, None for the compiler.
        related_information: Additional locations shown with the record.
    """

    source: Optional[str] = None
    related_information: Optional[Tuple[DiagnosticRelatedInformation, ...]] = None

    def to_dict(self) -> Dict[str, Any]:
        data = _serialize(self)
        if self.source is not None:
            data["source"] = self.source
        if self.related_information is not None:
            data["relatedInformation"] = [info.to_dict() for info in self.related_information]
        return data


def _serialize(info: DiagnosticRelatedInformation) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    if info.file is not None:
        data["file"] = info.file.file_name
    if info.start is not None:
        data["start"] = info.start
    if info.length is not None:
        data["length"] = info.length
    message = info.message_text
    data["messageText"] = message if isinstance(message, str) else message.to_dict()
    data["category"] = int(info.category)
    data["code"] = info.code
    return data


def flatten_diagnostic_message_text(
    message: Optional[MessageText], new_line: str, indent: int = 0
) -> str:
    """Render a message chain as text, two spaces of indent per level."""
    if message is None:
        return ""
    if isinstance(message, str):
        return message
    result = ""
    if indent:
        result += new_line + "  " * indent
    result += message.message_text
    for child in message.next or ():
        result += flatten_diagnostic_message_text(child, new_line, indent + 1)
    return result


def create_compiler_diagnostic(message: "DiagnosticMessage", *args: object) -> Diagnostic:
    """Build a global (file-less) diagnostic from a catalog message."""
    return Diagnostic(
        file=None,
        start=None,
        length=None,
        message_text=message.format(*args),
        category=message.category,
        code=message.code,
    )


def create_file_diagnostic(
    file: "SourceFile", start: int, length: int, message: "DiagnosticMessage", *args: object
) -> Diagnostic:
    """Build a diagnostic for a span of ``file`` from a catalog message."""
    return Diagnostic(
        file=file,
        start=start,
        length=length,
        message_text=message.format(*args),
        category=message.category,
        code=message.code,
    )


__all__ = [
    "DiagnosticCategory",
    "DiagnosticMessageChain",
    "DiagnosticRelatedInformation",
    "Diagnostic",
    "MessageText",
    "flatten_diagnostic_message_text",
    "create_compiler_diagnostic",
    "create_file_diagnostic",
]
