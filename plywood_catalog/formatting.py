"""
Description formatting: a tiny markdown-like subset rendered to safe HTML.

Supported:
- **bold**  -> <strong>bold</strong>
- *italic*  -> <em>italic</em>
- newlines  -> <br/>
"""

from __future__ import annotations

import re
from typing import Any

from markupsafe import Markup

_ESCAPES = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#39;",
})

_STRONG_RE = re.compile(r"\*\*(.+?)\*\*")
_EM_RE = re.compile(r"\*([^*<>\r\n]+)\*")


def escape_text(raw: str) -> str:
    return raw.translate(_ESCAPES)


def format_description(raw: Any) -> Markup:
    """
    Convert a raw description into an HTML fragment.

    Escaping runs first, so markup in the source text is shown literally and the
    tags added here are the only live ones. Strong and em are separate passes.
    """
    if raw is None or raw == "":
        return Markup("")

    safe = escape_text(str(raw))
    safe = _STRONG_RE.sub(r"<strong>\1</strong>", safe)
    safe = _EM_RE.sub(r"<em>\1</em>", safe)

    safe = safe.replace("\r\n", "\n").replace("\r", "\n")
    safe = safe.replace("\n", "<br/>")
    return Markup(safe)
