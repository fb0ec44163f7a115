"""Line-based `{{token}}` template rendering.

Templates are sequences of lines. Each `{{name}}` placeholder whose name is
a known TemplateToken present in the context is replaced by its value;
anything else is left verbatim. Substituted values are never re-scanned.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from swift_docker.errors import TemplateMissingError, TemplateUnreadableError
from swift_docker.types import TemplateContext, TemplateToken, TemplateValue

logger = logging.getLogger(__name__)

TOKEN_START = "{{"
TOKEN_END = "}}"

BUILD_SCRIPT_TEMPLATE: tuple[str, ...] = ("RUN sh /build_scripts/{{script_file}}",)

_TOKENS_BY_NAME = {token.value: token for token in TemplateToken}


def template_value(value: TemplateValue) -> str:
    """Return the string form of a context value.

    Plain strings render as themselves; sequences of strings render as
    their elements joined by newlines.
    """
    if isinstance(value, str):
        return value
    return "\n".join(str(item) for item in value)


def render_line(line: str, context: TemplateContext) -> str:
    """Render a single template line.

    Args:
        line: Template line, possibly holding `{{token}}` placeholders.
        context: Values for the known tokens.

    Returns:
        The rendered line.
    """
    cursor = 0
    while True:
        start = line.find(TOKEN_START, cursor)
        if start == -1:
            break
        end = line.find(TOKEN_END, start + len(TOKEN_START))
        if end == -1:
            # Unterminated placeholder
            break

        name = line[start + len(TOKEN_START) : end]
        token = _TOKENS_BY_NAME.get(name)
        if token is None or token not in context:
            cursor = start + len(TOKEN_START)
            continue

        replacement = template_value(context[token])
        line = line[:start] + replacement + line[end + len(TOKEN_END) :]
        cursor = start + len(replacement)

    return line


def render(lines: Iterable[str], context: TemplateContext) -> str:
    """Render a template.

    Args:
        lines: The lines composing the template.
        context: Values for the known tokens.

    Returns:
        The rendered lines joined with newlines.
    """
    return "\n".join(render_line(line, context) for line in lines)


def render_build_scripts(script_files: Sequence[str]) -> list[str]:
    """Render one `RUN` instruction per build script filename."""
    return [
        render(BUILD_SCRIPT_TEMPLATE, {TemplateToken.SCRIPT_FILE: script_file})
        for script_file in script_files
    ]


def load_template(path: Path) -> list[str]:
    """Read a template file into its lines.

    Args:
        path: Path to the template file.

    Returns:
        Template lines without line terminators.

    Raises:
        TemplateMissingError: If the file does not exist.
        TemplateUnreadableError: If the file cannot be read or decoded.
    """
    if not path.exists():
        raise TemplateMissingError(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateUnreadableError(path, str(e)) from e

    lines = text.splitlines()
    logger.debug("Loaded template %s (%d lines)", path, len(lines))
    return lines


__all__ = [
    "BUILD_SCRIPT_TEMPLATE",
    "load_template",
    "render",
    "render_build_scripts",
    "render_line",
    "template_value",
]
