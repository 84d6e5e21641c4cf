"""Tests for the post content renderer."""

from __future__ import annotations

import html
import re

import pytest

from notepress.md_render import OL_OPEN, PARAGRAPH_CLASS, UL_OPEN, escape_html, render


def _code_bodies(out: str) -> list[tuple[str, str]]:
    return [
        (lang, html.unescape(body))
        for lang, body in re.findall(r'<code class="language-([^"]*)">(.*?)</code>', out, re.S)
    ]


def test_empty_input():
    assert render("") == ""


def test_whitespace_only_input():
    assert render("   \n\t\n  ") == ""


def test_escape_html_covers_all_five():
    assert escape_html("&<>\"'") == "&amp;&lt;&gt;&quot;&#x27;"


def test_escape_leaves_math_delimiters_alone():
    text = r"$x$ and $$y$$ and \(z\) and \[w\]"
    assert escape_html(text) == text
    assert text in render(text)


# ---------------------------------------------------------------------------
# Fenced code
# ---------------------------------------------------------------------------


def test_fenced_block():
    out = render("```js\nconst x = 1;\n```")
    assert out.count("<pre") == 1
    assert _code_bodies(out) == [("js", "const x = 1;")]
    assert out.endswith("</code></pre>")


def test_fence_without_language_defaults_to_text():
    out = render("```\nplain\n```")
    assert _code_bodies(out) == [("text", "plain")]


def test_fence_language_is_trimmed():
    out = render("```   python  \nx\n```")
    assert _code_bodies(out) == [("python", "x")]


def test_unterminated_fence_is_closed_at_end():
    out = render("```python\nprint(1)")
    assert out.count("<pre") == 1
    assert out.count("</pre>") == 1
    assert _code_bodies(out) == [("python", "print(1)")]


def test_fence_body_is_not_parsed():
    src = "```md\n# not a heading\n- not a list\n1. nope\n\n<b>&</b>\n```"
    out = render(src)
    assert "<h1" not in out
    assert "<li>" not in out
    assert f'<p class="{PARAGRAPH_CLASS}">' not in out
    assert _code_bodies(out) == [("md", "# not a heading\n- not a list\n1. nope\n\n<b>&</b>")]
    assert "&lt;b&gt;&amp;&lt;/b&gt;" in out


def test_fence_language_is_escaped():
    out = render('```"><script>\nx\n```')
    assert "<script>" not in out
    assert 'class="language-&quot;&gt;&lt;script&gt;"' in out


def test_fence_flushes_paragraph_and_closes_list():
    out = render("intro\n- item\n```\ncode\n```")
    # "- item" is a list item, so the paragraph is flushed before the list
    assert out.index("</p>") < out.index(UL_OPEN)
    assert out.index("</ul>") < out.index("<pre")


def test_fence_opened_mid_paragraph():
    out = render("line\n```c\nint x;\n```\nafter")
    assert out.index("</p>") < out.index("<pre")
    assert out.rstrip().endswith('<p class="my-3">after</p>')


def test_fence_preserves_indentation_and_blank_lines():
    out = render("```py\ndef f():\n\n    return 1\n```")
    assert _code_bodies(out) == [("py", "def f():\n\n    return 1")]


def test_empty_fence():
    out = render("```\n```")
    assert _code_bodies(out) == [("text", "")]


def test_two_fences_in_a_row():
    out = render("```a\n1\n```\n```b\n2\n```")
    assert _code_bodies(out) == [("a", "1"), ("b", "2")]


def test_fence_must_start_the_line():
    out = render("  ```js\nx")
    assert "<pre" not in out
    assert out.startswith("<p")


# ---------------------------------------------------------------------------
# Headings
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("level", [1, 2, 3])
def test_heading_levels(level):
    out = render("#" * level + " Title")
    assert out.startswith(f"<h{level} ")
    assert out.endswith(f">Title</h{level}>")


def test_heading_classes_get_smaller():
    h1 = re.search(r'<h1 class="([^"]+)"', render("# a")).group(1)
    h3 = re.search(r'<h3 class="([^"]+)"', render("### a")).group(1)
    assert "text-2xl font-bold" in h1
    assert "text-lg font-semibold" in h3


def test_heading_requires_space():
    out = render("#Title")
    assert "<h1" not in out
    assert out == '<p class="my-3">#Title</p>'


def test_four_hashes_is_paragraph():
    assert render("#### deep") == '<p class="my-3">#### deep</p>'


def test_heading_text_is_escaped_and_not_inline_parsed():
    out = render("## a <b> & **c**")
    assert ">a &lt;b&gt; &amp; **c**</h2>" in out


def test_indented_heading():
    assert render("   ## Title").startswith("<h2 ")


def test_heading_closes_list_and_paragraph():
    out = render("text\n- a\n# H")
    assert out.index("</ul>") < out.index("<h1")


# ---------------------------------------------------------------------------
# Lists
# ---------------------------------------------------------------------------


def test_unordered_list_is_one_wrapper():
    out = render("- a\n- b\n- c")
    assert out.count("<ul") == 1
    assert out.count("</ul>") == 1
    assert out.count("<li>") == 3
    assert out == f"{UL_OPEN}<li>a</li><li>b</li><li>c</li></ul>"


def test_star_marker():
    out = render("* a\n- b")
    assert out.count("<ul") == 1
    assert "<li>a</li><li>b</li>" in out


def test_ordered_list():
    out = render("1. one\n2. two\n10. ten")
    assert out == f"{OL_OPEN}<li>one</li><li>two</li><li>ten</li></ol>"


def test_switching_list_type_closes_previous():
    out = render("- a\n1. b")
    assert f"</ul>{OL_OPEN}" in out
    out = render("1. a\n- b")
    assert f"</ol>{UL_OPEN}" in out


def test_blank_line_splits_lists():
    out = render("- a\n\n- b")
    assert out.count("<ul") == 2


def test_list_item_text_is_escaped():
    assert "<li>x &lt; y &amp;&amp; z</li>" in render("- x < y && z")


def test_marker_without_space_is_paragraph():
    out = render("-a\n1.b")
    assert "<li>" not in out
    assert out == '<p class="my-3">-a<br>1.b</p>'


def test_indented_items_are_flattened():
    out = render("- a\n    - b\n        - c")
    assert out.count("<ul") == 1
    assert "<li>a</li><li>b</li><li>c</li>" in out


def test_plain_line_after_list_does_not_close_it():
    # Only blank lines, headings, fences, a list type switch or end of
    # input close a list.
    out = render("- a\ntext")
    assert out == f'{UL_OPEN}<li>a</li><p class="my-3">text</p></ul>'


def test_list_item_flushes_pending_paragraph():
    out = render("intro\n- a")
    assert out == f'<p class="my-3">intro</p>{UL_OPEN}<li>a</li></ul>'


# ---------------------------------------------------------------------------
# Paragraphs
# ---------------------------------------------------------------------------


def test_adjacent_lines_share_a_paragraph():
    out = render("line one\nline two")
    assert out == '<p class="my-3">line one<br>line two</p>'


def test_blank_line_separates_paragraphs():
    out = render("first\n\nsecond")
    assert out.count("<p") == 2


def test_paragraph_lines_escaped_individually():
    out = render("a < b\nc > d")
    assert "a &lt; b<br>c &gt; d" in out


def test_paragraph_keeps_raw_line_whitespace():
    out = render("  indented")
    assert out == '<p class="my-3">  indented</p>'


@pytest.mark.parametrize("ch", ["\x1c", "\x1d", "\x1e", "\x1f", "\x85"])
def test_separator_controls_are_not_whitespace(ch):
    assert render(ch) == f'<p class="my-3">{ch}</p>'
    assert "<li>" not in render(f"-{ch}item")


def test_bom_and_nbsp_count_as_whitespace():
    assert render("\ufeff") == ""
    assert render("\xa0## Title\u3000").startswith("<h2 ")
    assert "<li>x</li>" in render("1.\u2003x")
    assert _code_bodies(render("```\ufeffjs\xa0\nx\n```")) == [("js", "x")]


def test_non_ascii_digits_do_not_start_ordered_items():
    out = render("\u0663. three")
    assert "<ol" not in out


def test_crlf_is_normalized():
    out = render("a\r\nb\r\n\r\n- c")
    assert "\r" not in out
    assert '<p class="my-3">a<br>b</p>' in out
    assert "<li>c</li>" in out


# ---------------------------------------------------------------------------
# Escaping across constructs
# ---------------------------------------------------------------------------

_HOSTILE = [
    "<script>alert(1)</script>",
    "# <img src=x onerror='a'>",
    '- "quoted" & <tag>',
    "1. it's <b>bold</b>",
    "```<lang>\n</code></pre><script>\n```",
    "```\n'\"<&>",
]


@pytest.mark.parametrize("src", _HOSTILE)
def test_literal_specials_never_leak(src):
    out = render(src)
    # Remove the renderer's own structural tags; nothing markup-like may remain.
    stripped = re.sub(
        r'</?(p|h[1-3]|ul|ol|li|pre|code|br)( class="[^"<>]*")?>',
        "",
        out,
    )
    for ch in "<>\"'":
        assert ch not in stripped
    assert re.sub(r"&(amp|lt|gt|quot|#x27);", "", stripped).count("&") == 0


def test_mixed_document():
    src = (
        "# Problem\n"
        "Given $n$, find\n"
        "the answer.\n"
        "\n"
        "## Approach\n"
        "1. Sort\n"
        "2. Sweep\n"
        "\n"
        "```cpp\n"
        "int main() { return 0; }\n"
        "```\n"
        "- done"
    )
    out = render(src)
    order = [
        out.index("<h1"),
        out.index("<p"),
        out.index("<h2"),
        out.index("<ol"),
        out.index("<pre"),
        out.index("<ul"),
    ]
    assert order == sorted(order)
    assert "Given $n$, find<br>the answer." in out
    assert _code_bodies(out) == [("cpp", "int main() { return 0; }")]
    assert out.endswith("</ul>")
