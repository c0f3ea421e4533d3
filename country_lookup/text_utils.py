"""Text helpers for console and log messages."""

import textwrap


def pluralize(count: int, plural: str = 's') -> str:
    """Return `plural` unless `count` is exactly 1."""
    return '' if count == 1 else plural


def format_message_paragraph(text: str, /) -> str:
    """Collapse a triple-quoted message into a single line.

    Lines are dedented, stripped and joined with a space, so the message reads as one log record.
    """
    lines = textwrap.dedent(text).strip().splitlines()
    return ' '.join(line.strip() for line in lines if line.strip())
