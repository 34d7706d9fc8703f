"""HTML template rendering by literal ``{{name}}`` substitution."""

import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from errors import TemplateNotFoundError

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).with_name("templates")

# ampersand first
_HTML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#39;"),
)


class SafeHtml(str):
    """Markup that was assembled from already escaped pieces; inserted verbatim."""

    def __repr__(self) -> str:
        return f"SafeHtml({str.__repr__(self)})"


def escape_html(value: Any) -> str:
    '''Escape ``& < > " '`` in the text form of ``value``; None renders as "".'''
    text = "" if value is None else str(value)
    for char, entity in _HTML_ESCAPES:
        text = text.replace(char, entity)
    return text


def _substitution(value: Any) -> str:
    if isinstance(value, SafeHtml):
        return str(value)
    return escape_html(value)


def load_template(name: str, templates_dir: Optional[Path] = None) -> str:
    """
    Read a template file fully, on every call.

    Args:
        name: file name relative to the templates directory.
        templates_dir: override for the templates directory.

    Raises:
        TemplateNotFoundError: if the file is missing or lies outside the directory.
    """

    root = (templates_dir or TEMPLATES_DIR).resolve()
    path = (root / name).resolve()
    if root not in path.parents or not path.is_file():
        logger.error("Template not found", extra={"template": name})
        raise TemplateNotFoundError(f"Template {name} not found")
    return path.read_text(encoding="utf-8")


def render_view(
    name: str,
    replacements: Optional[Mapping[str, Union[str, SafeHtml, Any]]] = None,
    templates_dir: Optional[Path] = None,
) -> str:
    """
    Render a template by replacing every ``{{key}}`` for each key in ``replacements``.

    Values are HTML escaped unless wrapped in SafeHtml. Placeholders that have no
    entry in ``replacements`` are left in the output as they are.

    Args:
        name: template file name, e.g. ``"item.html"``.
        replacements: placeholder name to value mapping.
        templates_dir: override for the templates directory.

    Returns:
        str: the rendered document.
    """

    html = load_template(name, templates_dir)
    for key, value in (replacements or {}).items():
        html = html.replace("{{" + key + "}}", _substitution(value))
    return html
