"""Jinja2 rendering for the server-side pages."""
from pathlib import Path
from typing import Any

from fastapi.responses import HTMLResponse
from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

TEMPLATES_DIR = Path(__file__).parent / "templates"

# Strict undefined: a missing context variable is a bug, not an empty string
_jinja_env = Environment(
    loader=FileSystemLoader(TEMPLATES_DIR),
    autoescape=select_autoescape(["html"]),
    undefined=StrictUndefined,
)


def render_page(template_name: str, status_code: int = 200, **context: Any) -> HTMLResponse:
    """Render a template from api/templates into an HTML response."""
    template = _jinja_env.get_template(template_name)
    return HTMLResponse(template.render(**context), status_code=status_code)
