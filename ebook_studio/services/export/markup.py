# SPDX-License-Identifier: Apache-2.0
"""
Lightweight chapter markup -> HTML/XHTML fragments.

Chapter bodies are plain text split into blocks on blank lines. Each block
is matched against an ordered rule list (first match wins):

    ### text        -> <h3>
    ## text / # text -> <h2>
    > line (all)    -> <blockquote>, lines joined with a line break
    - / * (all)     -> <ul>
    1. (all)        -> <ol>
    anything else   -> <p> with **bold**, *emphasis* and `code`

There is no nesting. All literal text is escaped for the target dialect.
"""
from __future__ import annotations

import html
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

NO_CONTENT_HTML = '<p class="no-content">No content available.</p>'

_BLOCK_SPLIT = re.compile(r"\n[ \t]*\n")
_UNORDERED_ITEM = re.compile(r"^[-*] ")
_ORDERED_ITEM = re.compile(r"^\d+\.\s+")
_INLINE = re.compile(r"\*\*(?P<strong>.+?)\*\*|\*(?P<em>.+?)\*|`(?P<code>.+?)`")

_XML_ENTITIES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&apos;",
}
_XML_ESCAPE = re.compile("[&<>\"']")


def escape_html(text: str) -> str:
    return html.escape(text or "", quote=True)


def escape_xml(text: str) -> str:
    return _XML_ESCAPE.sub(lambda m: _XML_ENTITIES[m.group(0)], text or "")


@dataclass(frozen=True)
class Dialect:
    name: str
    line_break: str
    escape: Callable[[str], str]


HTML = Dialect(name="html", line_break="<br>", escape=escape_html)
XHTML = Dialect(name="xhtml", line_break="<br/>", escape=escape_xml)


# ------------------------------ inline -----------------------------------


def format_inline(text: str, dialect: Dialect = HTML) -> str:
    """
    Escape text and apply the inline dialect. Matches never overlap and
    bold is tried before emphasis so ``**`` is not read as two ``*``.
    """
    out: List[str] = []
    pos = 0
    for m in _INLINE.finditer(text):
        out.append(dialect.escape(text[pos:m.start()]))
        if m.group("strong") is not None:
            out.append(f"<strong>{dialect.escape(m.group('strong'))}</strong>")
        elif m.group("em") is not None:
            out.append(f"<em>{dialect.escape(m.group('em'))}</em>")
        else:
            out.append(f"<code>{dialect.escape(m.group('code'))}</code>")
        pos = m.end()
    out.append(dialect.escape(text[pos:]))
    return "".join(out)


# ------------------------------ blocks -----------------------------------


def split_blocks(content: str) -> List[str]:
    normalized = (content or "").replace("\r\n", "\n").replace("\r", "\n")
    return [b.strip() for b in _BLOCK_SPLIT.split(normalized) if b.strip()]


def _lines(block: str) -> List[str]:
    return [line.strip() for line in block.split("\n") if line.strip()]


def _is_quote_line(line: str) -> bool:
    # lines arrive stripped, so an empty "> " line shows up as ">"
    return line == ">" or line.startswith("> ")


def _heading(level: int, text: str, dialect: Dialect) -> str:
    return f"<h{level}>{dialect.escape(' '.join(_lines(text)))}</h{level}>"


def _blockquote(lines: Sequence[str], dialect: Dialect) -> str:
    body = dialect.line_break.join(format_inline(line[2:], dialect) for line in lines)
    return f"<blockquote>{body}</blockquote>"


def _list(tag: str, items: Sequence[str], dialect: Dialect) -> str:
    rendered = "\n".join(f"<li>{format_inline(item, dialect)}</li>" for item in items)
    return f"<{tag}>\n{rendered}\n</{tag}>"


def format_block(block: str, dialect: Dialect = HTML) -> Optional[str]:
    """Render one block; returns None for blank input."""
    trimmed = block.strip()
    if not trimmed:
        return None

    if trimmed.startswith("### "):
        return _heading(3, trimmed[4:], dialect)
    if trimmed.startswith("## "):
        return _heading(2, trimmed[3:], dialect)
    if trimmed.startswith("# "):
        return _heading(2, trimmed[2:], dialect)

    lines = _lines(trimmed)
    if all(_is_quote_line(line) for line in lines):
        return _blockquote(lines, dialect)
    if all(_UNORDERED_ITEM.match(line) for line in lines):
        return _list("ul", [line[2:].strip() for line in lines], dialect)
    if all(_ORDERED_ITEM.match(line) for line in lines):
        return _list("ol", [_ORDERED_ITEM.sub("", line, count=1) for line in lines], dialect)

    return f"<p>{format_inline(' '.join(lines), dialect)}</p>"


def format_content(content: str, dialect: Dialect = HTML) -> str:
    """
    Convert a chapter body into markup. Blank bodies yield a placeholder
    paragraph rather than an empty fragment.
    """
    rendered = [f for f in (format_block(b, dialect) for b in split_blocks(content)) if f]
    if not rendered:
        return NO_CONTENT_HTML
    return "\n".join(rendered)
