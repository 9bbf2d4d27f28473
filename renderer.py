"""
Renderer for the small markdown subset the lesson prompt asks for.

Supported, one rule per line: ``### `` headings, ``> `` quotes, ``---``
rules, ``* `` bullet items and plain paragraphs, plus inline ``**bold**``.
Nothing else (no nesting, links or code). Text is escaped before it is
wrapped, so model output can never inject markup.
"""

import re
from typing import List

from markupsafe import Markup, escape

_BOLD = re.compile(r"\*\*(.*?)\*\*")


def _inline(text: str) -> str:
    # escape() leaves "*" alone, so bold spans survive escaping
    return _BOLD.sub(r"<strong>\1</strong>", str(escape(text)))


def render_lesson(text: str) -> Markup:
    html: List[str] = []
    in_list = False

    def close_list():
        nonlocal in_list
        if in_list:
            html.append("</ul>")
            in_list = False

    for line in text.strip().split("\n"):
        line = line.rstrip("\r")

        if line.startswith("### "):
            close_list()
            html.append(f"<h3>{_inline(line[4:])}</h3>")
        elif line.startswith("> "):
            close_list()
            html.append(f"<blockquote>{_inline(line[2:])}</blockquote>")
        elif line.strip() == "---":
            close_list()
            html.append("<hr />")
        elif line.startswith("* "):
            if not in_list:
                html.append("<ul>")
                in_list = True
            html.append(f"<li>{_inline(line[2:])}</li>")
        else:
            close_list()
            if line.strip():
                html.append(f"<p>{_inline(line)}</p>")
            else:
                # spacer between paragraphs and example groups
                html.append('<div class="spacer"></div>')

    close_list()
    return Markup("".join(html))
