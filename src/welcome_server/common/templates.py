"""Greeting templating helpers."""
from __future__ import annotations
import html

GREETING_TEMPLATE = "Hello, {{name}}"
ROOT_GREETING = "Hello, World!"

def render_greeting(name: str, template: str = GREETING_TEMPLATE, escape: bool = False) -> str:
    """
    Render a name into the greeting template.

    The name is substituted verbatim unless ``escape`` is set, in which case
    it is HTML-escaped first.

    Args:
        name: Name to greet.
        template: Template content containing {{name}}.
        escape: HTML-escape the name before substitution.

    Returns:
        Rendered greeting.
    """
    if escape:
        name = html.escape(name)
    return template.replace("{{name}}", name)
