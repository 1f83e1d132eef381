"""
Response rendering for the Icinga dashboard.

The HTML pages are Jinja2 templates shipped in the package's ``templates``
directory and rendered with autoescaping. Handlers never call the render
functions directly but go through :func:`safe_render`, which turns a failing
template into a fixed 500 response instead of letting the exception reach the
server.
"""

import logging
from typing import Callable, Iterable

from aiohttp import web
from jinja2 import Environment, PackageLoader, StrictUndefined

from icinga_dashboard.domain import MonitoredRow, ObjectType

# Module logger
logger = logging.getLogger(__name__)

HOST_STATE_NAMES = {0: "up", 1: "down", 2: "unreachable"}
SERVICE_STATE_NAMES = {0: "ok", 1: "warning", 2: "critical", 3: "unknown"}

# Escapes applied to a quoted value in plain text error messages
_QUOTED_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t", "\0": "\\0"}

templates = Environment(
    loader=PackageLoader("icinga_dashboard", "templates"),
    autoescape=True,
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
)


def plain_text_response(status: int, text: str) -> web.Response:
    return web.Response(status=status, text=text, content_type="text/plain", charset="utf-8")


def html_response(html: str, status: int = 200) -> web.Response:
    return web.Response(status=status, text=html, content_type="text/html", charset="utf-8")


def internal_error_response() -> web.Response:
    return plain_text_response(500, "500 Internal Server Error")


def not_found_response() -> web.Response:
    return plain_text_response(404, "404 Not Found")


def quote_value(value: str) -> str:
    """
    Double-quote a value for a plain text message.

    Backslashes, double quotes and control characters are escaped, so the
    quoted value cannot be confused with the surrounding text.
    """
    escaped = []
    for char in value:
        if char in _QUOTED_ESCAPES:
            escaped.append(_QUOTED_ESCAPES[char])
        elif not char.isprintable():
            escaped.append(f"\\u{{{ord(char):x}}}")
        else:
            escaped.append(char)
    return '"' + "".join(escaped) + '"'


def missing_parameter_response(name: str) -> web.Response:
    return plain_text_response(400, f'missing required parameter "{name}"')


def invalid_parameter_response(name: str, value: str) -> web.Response:
    return plain_text_response(
        400, f'required parameter "{name}" has invalid value {quote_value(value)}'
    )


def safe_render(template: Callable[..., str], *args: object) -> web.Response:
    """
    Render an HTML template into a 200 response.

    Any exception raised while rendering, such as a ``jinja2.TemplateError``,
    is logged and replaced by the fixed 500 response.
    """
    try:
        rendered = template(*args)
    except Exception:
        logger.exception(f"Failed to render template {template.__name__}")
        return internal_error_response()
    return html_response(rendered)


def render_index() -> str:
    """The start page holding the query form; the form is built by ``script.js``."""
    return templates.get_template("index.html").render()


def state_name(objtype: ObjectType, state: int) -> str:
    """CSS-friendly name of a state, e.g. ``critical`` or ``down``."""
    names = SERVICE_STATE_NAMES if objtype == ObjectType.SERVICES else HOST_STATE_NAMES
    return names.get(state, "unknown")


def render_table(objtype: ObjectType, rows: Iterable[MonitoredRow]) -> str:
    """The status table; rows are rendered in the order given."""
    return templates.get_template("table.html").render(
        rows=[(row, state_name(objtype, row.state)) for row in rows]
    )


def render_upstream_error(status_code: int, error_text: str) -> str:
    """The page shown when Icinga answered with something other than 200."""
    return templates.get_template("icinga_error.html").render(
        status_code=status_code, error_text=error_text
    )
