"""Tests for the inline formatting pipeline.

Covers emphasis, the small constructs, code spans, escapes, links, images
and URL sanitization, plus property tests for attribute safety.
"""

import re

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from inkpress.inline import ALLOWED_SCHEMES, InlineFormatter, format_inline, sanitize_url
from inkpress.inline.escapes import ESCAPABLE
from inkpress.inline.placeholders import CLOSE, OPEN, Placeholders, strip_sentinels
from inkpress.themes import DEFAULT_COLOR_THEME

PRIMARY = DEFAULT_COLOR_THEME.primary
BOLD = f'<strong style="color: {PRIMARY}; font-weight: 900;">'
ITALIC = f'<em style="color: {DEFAULT_COLOR_THEME.text_secondary}; font-style: italic;">'

_URL_ATTR_RE = re.compile(r'<(?:a|img)\b[^>]*?\b(?:href|src)="([^"]*)"')


@pytest.fixture
def inline() -> InlineFormatter:
    return InlineFormatter(DEFAULT_COLOR_THEME)


class TestEmphasis:
    """Bold, italic and their combinations."""

    def test_bold(self, inline: InlineFormatter) -> None:
        assert inline.format("**bold**") == f"{BOLD}bold</strong>"

    def test_bold_underscore(self, inline: InlineFormatter) -> None:
        assert inline.format("__bold__") == f"{BOLD}bold</strong>"

    def test_italic(self, inline: InlineFormatter) -> None:
        assert inline.format("*it*") == f"{ITALIC}it</em>"

    def test_bold_italic(self, inline: InlineFormatter) -> None:
        html = inline.format("***both***")
        assert html.startswith("<strong><em ")
        assert "font-weight: 900" in html
        assert html.endswith("both</em></strong>")

    def test_italic_nested_in_bold(self, inline: InlineFormatter) -> None:
        html = inline.format("**a *b* c**")
        assert html == f"{BOLD}a {ITALIC}b</em> c</strong>"

    def test_snake_case_stays_literal(self, inline: InlineFormatter) -> None:
        assert inline.format("call snake_case_name now") == "call snake_case_name now"

    def test_spaced_asterisks_are_not_italic(self, inline: InlineFormatter) -> None:
        assert inline.format("2 * 3 * 4") == "2 * 3 * 4"


class TestSpecialConstructs:
    def test_strikethrough(self, inline: InlineFormatter) -> None:
        assert inline.format("~~gone~~").startswith("<del ")

    def test_subscript_and_superscript(self, inline: InlineFormatter) -> None:
        html = inline.format("H~2~O and x^2^")
        assert ">2</sub>" in html
        assert ">2</sup>" in html

    def test_highlight(self, inline: InlineFormatter) -> None:
        html = inline.format("==note==")
        assert html.startswith("<mark ")
        assert "note</mark>" in html

    def test_keyboard(self, inline: InlineFormatter) -> None:
        html = inline.format("press <kbd>Ctrl</kbd>")
        assert "<kbd style=" in html
        assert ">Ctrl</kbd>" in html

    def test_raw_html_is_escaped(self, inline: InlineFormatter) -> None:
        assert inline.format("<script>x</script>") == "&lt;script&gt;x&lt;/script&gt;"


class TestInlineCode:
    def test_code_span(self, inline: InlineFormatter) -> None:
        html = inline.format("use `a_b*c*`")
        assert "<code style=" in html
        assert ">a_b*c*</code>" in html
        assert "<em" not in html

    def test_code_content_escaped(self, inline: InlineFormatter) -> None:
        assert "&lt;div&gt;" in inline.format("`<div>`")


class TestEscapes:
    """Backslash escapes survive as literal characters."""

    @pytest.mark.parametrize("char", list(ESCAPABLE))
    def test_escape_round_trip(self, inline: InlineFormatter, char: str) -> None:
        assert inline.format(f"a \\{char} b") == f"a {char} b"

    def test_escaped_markers_are_not_syntax(self, inline: InlineFormatter) -> None:
        assert inline.format(r"\*\*not bold\*\*") == "**not bold**"

    def test_handle_escapes_off(self, inline: InlineFormatter) -> None:
        assert inline.format(r"a \# b", handle_escapes=False) == r"a \# b"


class TestPlaceholders:
    def test_sentinels_stripped_from_input(self) -> None:
        assert strip_sentinels(f"a{OPEN}C0{CLOSE}b") == "aC0b"

    def test_forged_token_is_not_restored(self, inline: InlineFormatter) -> None:
        """A sentinel typed by the user cannot pull in a code span."""
        html = inline.format(f"`x` {OPEN}C0{CLOSE}")
        assert html.count("<code") == 1

    def test_value_lookup(self) -> None:
        table = Placeholders("U")
        token = table.add("https://a")
        assert table.value(token) == "https://a"
        assert table.value("nope") is None
        assert len(table) == 1


class TestLinks:
    def test_link(self, inline: InlineFormatter) -> None:
        html = inline.format("[site](https://example.com)")
        assert 'href="https://example.com"' in html
        assert 'target="_blank" rel="noopener noreferrer"' in html
        assert ">site</a>" in html

    def test_link_label_keeps_formatting(self, inline: InlineFormatter) -> None:
        assert f"{BOLD}x</strong></a>" in inline.format("[**x**](https://a.io)")

    def test_scheme_less_link_gets_https(self, inline: InlineFormatter) -> None:
        assert 'href="https://example.com/a"' in inline.format("[a](example.com/a)")

    def test_unsafe_link_renders_label_only(self, inline: InlineFormatter) -> None:
        html = inline.format("[click](javascript:void)")
        assert html == "click"

    def test_underscores_in_target_untouched(self, inline: InlineFormatter) -> None:
        html = inline.format("[a](https://x.io/a_b_c*d*)")
        assert 'href="https://x.io/a_b_c*d*"' in html

    def test_ampersand_is_attribute_escaped(self, inline: InlineFormatter) -> None:
        assert 'href="https://x.io/?a=1&amp;b=2"' in inline.format("[q](https://x.io/?a=1&b=2)")


class TestImages:
    def test_image_with_caption_marker(self, inline: InlineFormatter) -> None:
        html = inline.format("![A cat](https://x.io/cat.png)")
        assert html.startswith('<img src="https://x.io/cat.png" alt="A cat" data-md-caption="true"')
        assert 'loading="lazy"' in html

    def test_image_without_alt_has_no_caption(self, inline: InlineFormatter) -> None:
        html = inline.format("![](https://x.io/cat.png)")
        assert "data-md-caption" not in html

    def test_javascript_image_is_inert(self, inline: InlineFormatter) -> None:
        html = inline.format("![alt](javascript:alert(1))")
        assert "javascript:" not in html
        assert "<img" not in html
        assert "[alt]" in html

    def test_image_is_not_a_link(self, inline: InlineFormatter) -> None:
        assert "<a " not in inline.format("![a](https://x.io/i.png)")


class TestSanitizeUrl:
    @pytest.mark.parametrize(
        "url",
        [
            "javascript:alert(1)",
            "JavaScript:alert(1)",
            "java\tscript:alert(1)",
            "java&#x09;script:alert(1)",
            "data:text/html;base64,AAAA",
            "vbscript:msgbox",
            "https://",
            "",
            "   ",
        ],
    )
    def test_rejected(self, url: str) -> None:
        assert sanitize_url(url) == ""

    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com/a_b?c=d*e",
            "http://example.com",
            "mailto:me@example.com",
            "tel:+123",
            "ftp://files.example.com/x",
        ],
    )
    def test_allowed_unchanged(self, url: str) -> None:
        assert sanitize_url(url) == url

    def test_scheme_less(self) -> None:
        assert sanitize_url("//cdn.example.com/x.js") == "https://cdn.example.com/x.js"

    def test_custom_allow_list(self) -> None:
        assert sanitize_url("mailto:a@b.c", frozenset({"https"})) == ""

    def test_allow_list_contents(self) -> None:
        assert frozenset({"http", "https", "mailto", "tel", "ftp"}) == ALLOWED_SCHEMES


def _url_scheme(value: str) -> str | None:
    match = re.match(r"^([a-zA-Z][a-zA-Z0-9+.-]*):", value)
    return match.group(1).lower() if match else None


_path_chars = st.text(
    alphabet=st.sampled_from("abcxyz019_*-~./?=&%"), min_size=0, max_size=20
)


class TestInlineProperties:
    """Property tests for attribute safety."""

    @given(path=_path_chars)
    @settings(max_examples=100)
    def test_link_target_byte_identical(self, path: str) -> None:
        """Emphasis and sub/superscript never reach inside a link target."""
        url = f"https://example.com/{path}"
        html = format_inline(f"[x]({url})", DEFAULT_COLOR_THEME)
        hrefs = _URL_ATTR_RE.findall(html)
        assert hrefs == [url.replace("&", "&amp;")]

    @given(text=st.text(max_size=60))
    @settings(max_examples=200)
    def test_emitted_schemes_are_allowed(self, text: str) -> None:
        """No href/src ever carries a scheme outside the allow-list."""
        html = format_inline(text, DEFAULT_COLOR_THEME)
        for value in _URL_ATTR_RE.findall(html):
            scheme = _url_scheme(value.replace("&amp;", "&"))
            assert scheme is None or scheme in ALLOWED_SCHEMES

    @given(
        scheme=st.sampled_from(["javascript", "data", "vbscript", "file"]),
        rest=st.text(alphabet="abc:/()1", max_size=10),
    )
    @settings(max_examples=50)
    def test_dangerous_schemes_never_emitted(self, scheme: str, rest: str) -> None:
        html = format_inline(f"[a]({scheme}:{rest}) ![b]({scheme}:{rest})", DEFAULT_COLOR_THEME)
        assert f'="{scheme}:' not in html
