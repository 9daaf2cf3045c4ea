"""Text helpers for user-facing remediation output."""

from __future__ import annotations

from typing import List, Sequence


def wrap_in_ascii_box(text: str, padding: int = 0) -> str:
    """Draw a box around a block of text.

    Every line is left-aligned and padded to the widest line, with
    ``padding`` extra spaces on both sides.
    """
    lines = text.split("\n")
    max_length = max(len(line) for line in lines)
    inner = max_length + padding * 2
    result: List[str] = ["╔" + "═" * inner + "╗"]
    for line in lines:
        result.append("║" + " " * padding + line.ljust(max_length) + " " * padding + "║")
    result.append("╚" + "═" * inner + "╝")
    return "\n".join(result)


def quote_process_args(args: Sequence[str]) -> List[str]:
    """Quote arguments containing spaces for display."""
    return [f'"{arg}"' if " " in arg else arg for arg in args]


def format_command_line(command: str, args: Sequence[str]) -> str:
    """Render a command and its arguments as a single printable line."""
    return " ".join([command, *quote_process_args(args)])
