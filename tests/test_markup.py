# tests/test_markup.py
from __future__ import annotations

from ebook_studio.services.export.markup import (
    HTML,
    NO_CONTENT_HTML,
    XHTML,
    escape_xml,
    format_block,
    format_content,
    format_inline,
    split_blocks,
)


def test_inline_bold_emphasis_and_code():
    out = format_inline("A **bold** and *soft* call to `x<y`")
    assert out == "A <strong>bold</strong> and <em>soft</em> call to <code>x&lt;y</code>"


def test_lone_asterisk_stays_literal():
    assert format_content("2 * 3 = 6") == "<p>2 * 3 = 6</p>"


def test_unordered_list_items():
    out = format_content("- one\n- two\n- three")
    assert out == "<ul>\n<li>one</li>\n<li>two</li>\n<li>three</li>\n</ul>"
    assert out.count("<li>") == 3


def test_star_bullets_and_inline_inside_items():
    out = format_content("* **first**\n* second")
    assert out == "<ul>\n<li><strong>first</strong></li>\n<li>second</li>\n</ul>"


def test_ordered_list_strips_numbers():
    assert format_content("1. Breathe\n2. Begin") == "<ol>\n<li>Breathe</li>\n<li>Begin</li>\n</ol>"


def test_mixed_lines_fall_back_to_paragraph():
    assert format_content("- a\nplain line") == "<p>- a plain line</p>"


def test_blockquote_joins_lines_per_dialect():
    text = "> first\n> second"
    assert format_content(text, HTML) == "<blockquote>first<br>second</blockquote>"
    assert format_content(text, XHTML) == "<blockquote>first<br/>second</blockquote>"


def test_headings():
    assert format_block("### Sub") == "<h3>Sub</h3>"
    assert format_block("## Mid") == "<h2>Mid</h2>"
    assert format_block("# Top") == "<h2>Top</h2>"


def test_headings_are_escaped_but_not_inline_formatted():
    assert format_block("## **A** & B") == "<h2>**A** &amp; B</h2>"


def test_paragraph_lines_are_joined_and_escaped():
    out = format_content("Tom & Jerry\n<script>alert(1)</script>")
    assert out == "<p>Tom &amp; Jerry &lt;script&gt;alert(1)&lt;/script&gt;</p>"


def test_blocks_split_on_blank_lines_with_whitespace():
    assert split_blocks("one\n  \ntwo\r\n\r\nthree") == ["one", "two", "three"]
    out = format_content("# Title\n\nBody text.")
    assert out == "<h2>Title</h2>\n<p>Body text.</p>"


def test_blank_content_yields_placeholder():
    assert format_content("") == NO_CONTENT_HTML
    assert format_content("  \n\n \t ") == NO_CONTENT_HTML


def test_xml_escaping_covers_quotes():
    assert escape_xml("a & b < c > \"d\" 'e'") == "a &amp; b &lt; c &gt; &quot;d&quot; &apos;e&apos;"
    assert format_content("it's", XHTML) == "<p>it&apos;s</p>"


def test_empty_quote_line_keeps_the_blockquote():
    assert format_content("> first\n>\n> third") == "<blockquote>first<br><br>third</blockquote>"


def test_html_escaping_covers_quotes():
    assert format_content("it's \"q\"") == "<p>it&#x27;s &quot;q&quot;</p>"
