from __future__ import annotations

from typing import Sequence

from rich.console import Console
from rich.style import Style
from rich.text import Text

from esrdecode.decode.model import FieldInfo
from esrdecode.render.highlight import Emphasis, highlight

INDEX_STYLE = Style(color="white")
NAME_STYLE = Style(color="cyan", bold=True)
TRUE_STYLE = Style(color="green", bold=True)
FALSE_STYLE = Style(color="red", bold=True)
HEX_STYLE = Style(color="green", bold=True)
BINARY_STYLE = Style(color="white")
LONG_NAME_STYLE = Style(color="white")

# neon orange
ACCENT_STYLE = Style(color="rgb(255,140,0)", bold=True)
PLAIN_STYLE = Style(color="white")

EMPHASIS_STYLES = {
    Emphasis.PLAIN: PLAIN_STYLE,
    Emphasis.ACCENT: ACCENT_STYLE,
}


def _field_line(field: FieldInfo, verbose: bool, indent: str) -> Text:
    line = Text(indent)
    if field.width == 1:
        line.append(f"{field.start:02}", style=INDEX_STYLE)
        line.append("     ")
        line.append(field.name, style=NAME_STYLE)
        line.append(": ")
        if field.value != 0:
            line.append("true", style=TRUE_STYLE)
        else:
            line.append("false", style=FALSE_STYLE)
    else:
        line.append(f"{field.start:02}..{field.start + field.width - 1:02}", style=INDEX_STYLE)
        line.append(" ")
        line.append(field.name, style=NAME_STYLE)
        line.append(": ")
        line.append(field.value_string(), style=HEX_STYLE)
        line.append(" ")
        line.append(field.value_binary_string(), style=BINARY_STYLE)

    if verbose and field.long_name:
        line.append(f" ({field.long_name})", style=LONG_NAME_STYLE)
    return line


def _description_line(description: str, indent: str) -> Text:
    line = Text(f"{indent}  ")
    for segment in highlight(f"# {description}"):
        line.append(segment.text, style=EMPHASIS_STYLES[segment.emphasis])
    return line


def render_fields(fields: Sequence[FieldInfo], verbose: bool, level: int = 0) -> list[Text]:
    """
    Render a decoded field tree as styled lines, two spaces of indent per level.
    A field's description, if any, goes on the line below it; subfields follow.
    """
    indent = " " * (level * 2)
    lines: list[Text] = []
    for field in fields:
        lines.append(_field_line(field, verbose, indent))
        if field.description is not None:
            lines.append(_description_line(field.description, indent))
        lines.extend(render_fields(field.subfields, verbose, level + 1))
    return lines


def print_fields(console: Console, fields: Sequence[FieldInfo], verbose: bool) -> None:
    for line in render_fields(fields, verbose):
        console.print(line, soft_wrap=True)
