"""Unit tests for cleaning links inside free text."""

import unittest

from clearurls.cleaner.cleaner import UrlCleaner
from clearurls.cleaner.text import find_links
from clearurls.core.exceptions import InvalidUrlError, PercentDecodeError, TextCleaningError


class TestFindLinks(unittest.TestCase):
    """Test suite for find_links."""

    def test_finds_links_in_order(self):
        text = "go to https://a.com/x, then http://b.org"
        spans = find_links(text)
        self.assertEqual([text[s:e] for s, e in spans], ["https://a.com/x", "http://b.org"])
        self.assertEqual(spans[0], (6, 21))

    def test_www_links(self):
        """Test that schemeless www links are found."""
        text = "see www.example.com/page."
        self.assertEqual([text[s:e] for s, e in find_links(text)], ["www.example.com/page"])

    def test_email_is_not_a_link(self):
        self.assertEqual(find_links("mail me@www.example.com"), [])

    def test_balanced_parentheses_are_kept(self):
        """Test that brackets belonging to the URL are not trimmed."""
        text = "(https://en.wikipedia.org/wiki/Foo_(bar))"
        spans = find_links(text)
        self.assertEqual(
            [text[s:e] for s, e in spans],
            ["https://en.wikipedia.org/wiki/Foo_(bar)"],
        )

    def test_no_links(self):
        self.assertEqual(find_links("nothing to see here"), [])

    def test_url_shapes_without_host_are_not_links(self):
        """Test that placeholders and bare schemes are not treated as links."""
        for text in (
            "Protocols look like http://... in docs",
            "ports like http://host:port/path are placeholders",
            "https://example.com:port/x",
            "broken https://[::1/ address",
            "email www.@foo",
            "http://-bad-.com",
        ):
            with self.subTest(text=text):
                self.assertEqual(find_links(text), [])

    def test_hosts_accepted(self):
        """Test localhost, IP addresses, ports and user info."""
        for link in (
            "http://localhost:8000/app",
            "http://127.0.0.1/",
            "http://[::1]:8080/",
            "https://user@example.com/a",
            "ftp://files.example.org/pub/",
        ):
            with self.subTest(link=link):
                text = f"open {link} now"
                self.assertEqual([text[s:e] for s, e in find_links(text)], [link])


class TestClearText(unittest.TestCase):
    """Test suite for UrlCleaner.clear_text."""

    @classmethod
    def setUpClass(cls):
        """Compile the embedded rules once for the whole suite."""
        cls.cleaner = UrlCleaner.from_embedded_rules()

    def test_markdown_links(self):
        """Test that markdown link targets and bare links are cleaned."""
        text = (
            "This is a [markdown link](http://example.com/?&&&&), "
            "and another: http://example.com/?&&&&"
        )
        self.assertEqual(
            self.cleaner.clear_text(text),
            "This is a [markdown link](http://example.com/), "
            "and another: http://example.com/",
        )

    def test_www_link_keeps_its_form(self):
        """Test that a www link is written back without a scheme."""
        self.assertEqual(
            self.cleaner.clear_text("see www.example.com/?utm_source=x."),
            "see www.example.com/.",
        )

    def test_parenthesized_link(self):
        self.assertEqual(
            self.cleaner.clear_text("(https://en.wikipedia.org/wiki/Foo_(bar)?utm_source=x)"),
            "(https://en.wikipedia.org/wiki/Foo_(bar))",
        )

    def test_angle_bracket_ftp_link(self):
        self.assertEqual(
            self.cleaner.clear_text("<ftp://example.com/test/?utm_source=abc>"),
            "<ftp://example.com/test/>",
        )

    def test_link_without_path(self):
        """Test that a cleaned link without path gets a root path."""
        self.assertEqual(
            self.cleaner.clear_text("and another: http://example.com?utm_source=1"),
            "and another: http://example.com/",
        )

    def test_url_shapes_are_left_alone(self):
        """Test that text mentioning URL shapes comes back unchanged."""
        for text in (
            "Protocols look like http://... in docs",
            "ports like http://host:port/path are placeholders",
            "email www.@foo",
        ):
            with self.subTest(text=text):
                self.assertEqual(self.cleaner.clear_text(text), text)

    def test_text_without_links_is_unchanged(self):
        text = "Plain text\nwith two lines and no links.\n"
        self.assertEqual(self.cleaner.clear_text(text), text)

    def test_errors_are_collected(self):
        """Test that all failing links are reported together."""
        text = "bad http://example.com:99999/x and worse https://example.org:70000/ here"

        with self.assertRaises(TextCleaningError) as ctx:
            self.cleaner.clear_text(text)

        errors = ctx.exception.errors
        self.assertEqual(len(errors), 2)
        self.assertTrue(all(isinstance(e, InvalidUrlError) for e in errors))

    def test_redirection_error_in_text(self):
        """Test that a broken redirection target is reported."""
        text = (
            "This is a [markdown link](http://example.com/?&&&&), "
            "and another: https://google.co.uk/url?foo=bar&q=http%F0"
        )

        with self.assertRaises(TextCleaningError) as ctx:
            self.cleaner.clear_text(text)

        errors = ctx.exception.errors
        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], PercentDecodeError)


if __name__ == "__main__":
    unittest.main()
