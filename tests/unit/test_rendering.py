"""Unit tests for content rendering and excerpts."""

from post_webhook.content.rendering import (
    EXCERPT_MORE,
    autop,
    get_excerpt,
    render_content,
    trim_words,
)


class TestAutop:
    """Test autop function."""

    def test_single_paragraph(self):
        assert autop("Hello") == "<p>Hello</p>\n"

    def test_blank_line_splits_paragraphs(self):
        assert autop("One\n\nTwo") == "<p>One</p>\n<p>Two</p>\n"

    def test_single_newline_becomes_break(self):
        assert autop("Line one\nLine two") == "<p>Line one<br />\nLine two</p>\n"

    def test_windows_newlines(self):
        assert autop("A\r\n\r\nB") == "<p>A</p>\n<p>B</p>\n"

    def test_block_elements_not_wrapped(self):
        """Test blocks starting with block-level markup are kept as written."""
        assert autop("<h2>Title</h2>\n\nBody") == "<h2>Title</h2>\n<p>Body</p>\n"
        assert autop("<ul>\n<li>x</li>\n</ul>") == "<ul>\n<li>x</li>\n</ul>\n"

    def test_comments_not_wrapped(self):
        assert autop("<!--more-->\n\nRest") == "<!--more-->\n<p>Rest</p>\n"

    def test_inline_elements_wrapped(self):
        """Test inline markup at the start of a block still gets a paragraph."""
        assert autop("<strong>Bold</strong> text") == "<p><strong>Bold</strong> text</p>\n"

    def test_empty(self):
        assert autop("") == ""
        assert autop("   \n\n  ") == ""

    def test_render_content_handles_none(self):
        assert render_content(None) == ""


class TestTrimWords:
    """Test trim_words function."""

    def test_short_text_unchanged(self):
        assert trim_words("a b c") == "a b c"

    def test_long_text_trimmed_with_more(self):
        """Test text over 55 words is cut and suffixed."""
        words = [f"w{i}" for i in range(60)]
        assert trim_words(" ".join(words)) == " ".join(words[:55]) + EXCERPT_MORE

    def test_exactly_limit_not_suffixed(self):
        words = [f"w{i}" for i in range(55)]
        assert trim_words(" ".join(words)) == " ".join(words)

    def test_markup_stripped(self):
        assert trim_words("<p>Hello <b>world</b></p>") == "Hello world"

    def test_empty(self):
        assert trim_words("") == ""


class TestGetExcerpt:
    """Test get_excerpt function."""

    def test_generated_from_content(self):
        assert get_excerpt("Hello <b>world</b>\n\nAgain") == "Hello world Again"

    def test_manual_excerpt_wins(self):
        assert get_excerpt("Long content here", "Hand written") == "Hand written"

    def test_blank_manual_excerpt_ignored(self):
        assert get_excerpt("Content", "   ") == "Content"

    def test_suffix_marker(self):
        assert EXCERPT_MORE == " [&hellip;]"
