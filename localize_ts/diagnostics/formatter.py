"""Human-readable rendering of diagnostics with colour and source context.

The layout follows the TypeScript compiler's ``--pretty`` output:

    src/app.ts:3:7 - error TS2324: Message text

    3 const greeting = msg('Hello');
            ~~~~~~~~

Output is composed as Rich segments and rendered to ANSI (or plain) text.
Messages are emitted as written, control characters included.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, List, Optional, Sequence

from rich.color import ColorSystem
from rich.console import Console
from rich.segment import Segment
from rich.style import Style

from localize_ts.diagnostics.model import (
    Diagnostic,
    DiagnosticCategory,
    flatten_diagnostic_message_text,
)
from localize_ts.utils.path_utils import convert_to_relative_path, current_directory

if TYPE_CHECKING:
    from localize_ts.syntax.source_file import SourceFile

logger = logging.getLogger("localize_ts.diagnostics.formatter")

_CYAN = Style.parse("bright_cyan")
_YELLOW = Style.parse("bright_yellow")
_GREY = Style.parse("bright_black")
_GUTTER_STYLE = Style.parse("reverse")
_GUTTER_SEPARATOR = " "
_ELLIPSIS = "..."
_HALF_INDENT = "  "
_INDENT = "    "

_CATEGORY_STYLES = {
    DiagnosticCategory.Warning: Style.parse("bright_yellow"),
    DiagnosticCategory.Error: Style.parse("bright_red"),
    DiagnosticCategory.Suggestion: Style.parse("bright_black"),
    DiagnosticCategory.Message: Style.parse("bright_blue"),
}


def _identity(name: str) -> str:
    return name


@dataclass(frozen=True)
class FormatDiagnosticsHost:
    """Display context for formatting.

    Attributes:
        current_directory: Directory file names are shown relative to.
        new_line: Line separator of the rendered string.
        get_canonical_file_name: Canonical form used when comparing path
            segments; file names are displayed as stored.
    """

    current_directory: str
    new_line: str = "\n"
    get_canonical_file_name: Callable[[str], str] = field(default=_identity)

    @classmethod
    def from_process(cls) -> "FormatDiagnosticsHost":
        """Host anchored at the process's current working directory."""
        return cls(current_directory=current_directory())


def _clamp(position: int, file: "SourceFile") -> int:
    return max(0, min(position, len(file.text)))


def _format_location(
    file: "SourceFile", start: int, host: FormatDiagnosticsHost
) -> List[Segment]:
    line, character = file.get_line_and_character_of_position(_clamp(start, file))
    relative_file_name = convert_to_relative_path(
        file.file_name, host.current_directory, host.get_canonical_file_name
    )
    return [
        Segment(relative_file_name, _CYAN),
        Segment(":"),
        Segment(str(line + 1), _YELLOW),
        Segment(":"),
        Segment(str(character + 1), _YELLOW),
    ]


def _format_code_span(
    file: "SourceFile",
    start: int,
    length: int,
    indent: str,
    squiggle_style: Style,
    new_line: str,
) -> List[Segment]:
    start = _clamp(start, file)
    end = _clamp(start + length, file)
    first_line, first_line_char = file.get_line_and_character_of_position(start)
    last_line, last_line_char = file.get_line_and_character_of_position(end)
    last_line_in_file = file.get_line_and_character_of_position(len(file.text))[0]

    has_more_than_five_lines = (last_line - first_line) >= 4
    gutter_width = len(str(last_line + 1))
    if has_more_than_five_lines:
        gutter_width = max(len(_ELLIPSIS), gutter_width)

    context: List[Segment] = []
    line = first_line
    while line <= last_line:
        context.append(Segment(new_line))
        # Elide the middle of long spans, keeping two lines at each end
        if has_more_than_five_lines and first_line + 1 < line < last_line - 1:
            context.append(Segment(indent))
            context.append(Segment(_ELLIPSIS.rjust(gutter_width), _GUTTER_STYLE))
            context.append(Segment(_GUTTER_SEPARATOR + new_line))
            line = last_line - 1

        line_start = file.get_position_of_line_and_character(line, 0)
        if line < last_line_in_file:
            line_end = file.get_position_of_line_and_character(line + 1, 0)
        else:
            line_end = len(file.text)
        line_content = file.text[line_start:line_end].rstrip().replace("\t", " ")

        context.append(Segment(indent))
        context.append(Segment(str(line + 1).rjust(gutter_width), _GUTTER_STYLE))
        context.append(Segment(_GUTTER_SEPARATOR + line_content + new_line))

        context.append(Segment(indent))
        context.append(Segment("".rjust(gutter_width), _GUTTER_STYLE))
        context.append(Segment(_GUTTER_SEPARATOR))
        if line == first_line:
            last_char_for_line = last_line_char if line == last_line else None
            lead = "".join(" " if not ch.isspace() else ch for ch in line_content[:first_line_char])
            squiggles = "~" * len(line_content[first_line_char:last_char_for_line])
            context.append(Segment(lead + squiggles, squiggle_style))
        elif line == last_line:
            context.append(Segment("~" * len(line_content[:last_line_char]), squiggle_style))
        else:
            context.append(Segment("~" * len(line_content), squiggle_style))
        line += 1
    return context


def format_diagnostics_with_color_and_context(
    diagnostics: Sequence[Diagnostic], host: FormatDiagnosticsHost
) -> List[Segment]:
    """Compose styled segments for ``diagnostics`` in the order given.

    Lines are separated by the host's ``new_line``.
    """
    new_line = host.new_line
    output: List[Segment] = []
    for diagnostic in diagnostics:
        file = diagnostic.file
        has_span = file is not None and diagnostic.start is not None
        category_style = _CATEGORY_STYLES.get(diagnostic.category, _GREY)

        if has_span:
            output.extend(_format_location(file, diagnostic.start, host))
            output.append(Segment(" - "))
        output.append(Segment(diagnostic.category.display_name, category_style))
        output.append(Segment(f" TS{diagnostic.code}: ", _GREY))
        output.append(Segment(flatten_diagnostic_message_text(diagnostic.message_text, new_line)))

        if has_span:
            output.append(Segment(new_line))
            output.extend(
                _format_code_span(
                    file, diagnostic.start, diagnostic.length or 0, "", category_style, new_line
                )
            )

        if diagnostic.related_information is not None:
            output.append(Segment(new_line))
            for info in diagnostic.related_information:
                if info.file is not None and info.start is not None:
                    output.append(Segment(new_line + _HALF_INDENT))
                    output.extend(_format_location(info.file, info.start, host))
                    output.extend(
                        _format_code_span(
                            info.file, info.start, info.length or 0, _INDENT, _CYAN, new_line
                        )
                    )
                message = flatten_diagnostic_message_text(info.message_text, new_line)
                output.append(Segment(new_line + _INDENT + message))
        output.append(Segment(new_line))
    return output


def _render(segments: Sequence[Segment], color: bool) -> str:
    if not color:
        return "".join(segment.text for segment in segments)
    return "".join(
        segment.style.render(segment.text, color_system=ColorSystem.STANDARD)
        if segment.style is not None
        else segment.text
        for segment in segments
    )


def stringify_diagnostics(
    diagnostics: Sequence[Diagnostic],
    host: Optional[FormatDiagnosticsHost] = None,
    *,
    color: bool = True,
) -> str:
    """Create a nice string for the given diagnostics.

    Args:
        diagnostics: Records to render, in display order.
        host: Display context; defaults to the process working directory.
        color: Emit ANSI colour codes (16-colour palette) when True.

    Returns:
        str: The formatted text, empty for no diagnostics.
    """
    host = host or FormatDiagnosticsHost.from_process()
    return _render(format_diagnostics_with_color_and_context(diagnostics, host), color)


def print_diagnostics(
    diagnostics: Sequence[Diagnostic],
    host: Optional[FormatDiagnosticsHost] = None,
    console: Optional[Console] = None,
) -> None:
    """Nicely log the given diagnostics to stderr.

    The console decides whether colour is used; its file receives exactly the
    text ``stringify_diagnostics`` produces.
    """
    console = console or Console(stderr=True)
    color = console.is_terminal and not console.no_color and console.color_system is not None
    logger.debug("Printing %d diagnostic(s)", len(diagnostics))
    output = stringify_diagnostics(diagnostics, host, color=color)
    console.file.write(output)
    console.file.flush()


__all__ = [
    "FormatDiagnosticsHost",
    "format_diagnostics_with_color_and_context",
    "stringify_diagnostics",
    "print_diagnostics",
]
