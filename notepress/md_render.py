"""Lightweight markdown-like renderer for post content.

Block-level only: headings, flat lists, fenced code and paragraphs. Math
delimiters and ``language-*`` code classes are left intact for KaTeX and
Prism, which run in the browser after the HTML is inserted.
"""

from __future__ import annotations

import html
import re

# Whitespace as browsers trim it. str.strip() and \s would also take
# \x1c-\x1f and \x85, and would miss U+FEFF.
WHITESPACE = "".join(
    chr(c)
    for c in (
        *range(0x09, 0x0E),
        0x20,
        0xA0,
        0x1680,
        *range(0x2000, 0x200B),
        0x2028,
        0x2029,
        0x202F,
        0x205F,
        0x3000,
        0xFEFF,
    )
)
_SPACE = "[" + WHITESPACE + "]+"

_HEADING_RE = re.compile(r"^(#{1,3})" + _SPACE + r"(.*)$")
_UL_RE = re.compile(r"^[-*]" + _SPACE + r"(.*)$")
_OL_RE = re.compile(r"^[0-9]+\." + _SPACE + r"(.*)$")

FENCE = "```"
DEFAULT_LANG = "text"

HEADING_CLASSES = {
    1: "text-2xl font-bold mt-6 mb-2",
    2: "text-xl font-bold mt-5 mb-2",
    3: "text-lg font-semibold mt-4 mb-2",
}
PARAGRAPH_CLASS = "my-3"
PRE_CLASS = "my-4 rounded-lg overflow-auto"
UL_OPEN = '<ul class="list-disc pl-6 my-3 space-y-1">'
OL_OPEN = '<ol class="list-decimal pl-6 my-3 space-y-1">'


def escape_html(text: str) -> str:
    """Escape &, <, >, " and ' so literal text can't become markup."""
    return html.escape(text, quote=True)


def _code_block(lang: str, lines: list[str]) -> str:
    body = escape_html("\n".join(lines))
    return (
        f'<pre class="{PRE_CLASS}"><code class="language-{escape_html(lang)}">'
        f"{body}</code></pre>"
    )


class _BlockState:
    """Accumulators for one render() call."""

    def __init__(self) -> None:
        self.out: list[str] = []
        self.para: list[str] = []
        self.code: list[str] = []
        self.code_lang = DEFAULT_LANG
        self.in_code = False
        self.in_ul = False
        self.in_ol = False

    def flush_para(self) -> None:
        if not self.para:
            return
        body = "<br>".join(escape_html(line) for line in self.para)
        self.out.append(f'<p class="{PARAGRAPH_CLASS}">{body}</p>')
        self.para = []

    def close_ul(self) -> None:
        if self.in_ul:
            self.out.append("</ul>")
            self.in_ul = False

    def close_ol(self) -> None:
        if self.in_ol:
            self.out.append("</ol>")
            self.in_ol = False

    def close_lists(self) -> None:
        self.close_ul()
        self.close_ol()

    def open_fence(self, info: str) -> None:
        self.flush_para()
        self.close_lists()
        self.in_code = True
        self.code_lang = info.strip(WHITESPACE) or DEFAULT_LANG
        self.code = []

    def close_fence(self) -> None:
        self.out.append(_code_block(self.code_lang, self.code))
        self.in_code = False
        self.code = []
        self.code_lang = DEFAULT_LANG

    def list_item(self, text: str, *, ordered: bool) -> None:
        self.flush_para()
        if ordered:
            self.close_ul()
            if not self.in_ol:
                self.out.append(OL_OPEN)
                self.in_ol = True
        else:
            self.close_ol()
            if not self.in_ul:
                self.out.append(UL_OPEN)
                self.in_ul = True
        self.out.append(f"<li>{escape_html(text)}</li>")

    def finish(self) -> str:
        # An unterminated fence is closed implicitly at end of input.
        if self.in_code:
            self.close_fence()
        else:
            self.flush_para()
            self.close_lists()
        return "".join(self.out)


def render(content: str) -> str:
    """Convert raw post content to an HTML fragment.

    Lines are handled in one pass. Inside a fence every line is literal
    code; outside, each line is classified in order as blank, heading,
    unordered item, ordered item, or paragraph text. Adjacent paragraph
    lines share one ``<p>`` joined by ``<br>``. Indentation before list
    markers is ignored, so nested lists come out flat.
    """
    state = _BlockState()

    for line in content.replace("\r\n", "\n").split("\n"):
        if line.startswith(FENCE):
            if state.in_code:
                state.close_fence()
            else:
                state.open_fence(line[len(FENCE) :])
            continue
        if state.in_code:
            state.code.append(line)
            continue

        stripped = line.strip(WHITESPACE)

        if not stripped:
            state.flush_para()
            state.close_lists()
            continue

        m = _HEADING_RE.match(stripped)
        if m:
            state.flush_para()
            state.close_lists()
            level = len(m.group(1))
            state.out.append(
                f'<h{level} class="{HEADING_CLASSES[level]}">'
                f"{escape_html(m.group(2))}</h{level}>"
            )
            continue

        m = _UL_RE.match(stripped)
        if m:
            state.list_item(m.group(1), ordered=False)
            continue

        m = _OL_RE.match(stripped)
        if m:
            state.list_item(m.group(1), ordered=True)
            continue

        state.para.append(line)

    return state.finish()
