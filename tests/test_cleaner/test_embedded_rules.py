"""Tests for UrlCleaner with the rules bundled in the package.

These exercise real-world provider rules: global tracking parameters,
search engine redirections, shop affiliate tags and raw rules.
"""

import unittest

from clearurls.cleaner.cleaner import UrlCleaner


class TestEmbeddedRules(unittest.TestCase):
    """Test cleaning with the embedded rules."""

    @classmethod
    def setUpClass(cls):
        """Compile the embedded rules once for the whole suite."""
        cls.cleaner = UrlCleaner.from_embedded_rules()

    def assertCleaned(self, url: str, expected: str) -> None:
        self.assertEqual(self.cleaner.clear_url(url), expected)

    def assertUnchanged(self, url: str) -> None:
        self.assertEqual(self.cleaner.clear_url(url), url)

    def test_global_tracking_parameters(self):
        """Test that global rules apply to any site."""
        self.assertCleaned(
            "https://deezer.com/track/891177062?utm_source=deezer",
            "https://deezer.com/track/891177062",
        )
        self.assertCleaned("https://example.com/?fbclid=IwAR1xyz", "https://example.com/")
        self.assertCleaned(
            "https://blog.example.net/post?id=7&gclid=abc&utm_campaign=spring",
            "https://blog.example.net/post?id=7",
        )

    def test_site_specific_parameters(self):
        self.assertCleaned(
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ&feature=share&kw=abc",
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        )

    def test_google_redirection(self):
        """Test that Google result links resolve to their target."""
        self.assertCleaned(
            "https://www.google.com/url?q=https%253A%252F%252Fpypi.org%252Fproject%252FUnalix",
            "https://pypi.org/project/Unalix",
        )

    def test_google_amp_redirection(self):
        """Test that AMP links without scheme get http prepended."""
        self.assertCleaned(
            "https://www.google.com/amp/s/de.statista.com/infografik/amp/22496/"
            "anzahl-der-gesamten-positiven-corona-tests-und-positivenrate/",
            "http://de.statista.com/infografik/amp/22496/"
            "anzahl-der-gesamten-positiven-corona-tests-und-positivenrate/",
        )

    def test_reddit_redirection(self):
        self.assertCleaned(
            "https://out.reddit.com/t3_abc?url=https%3A%2F%2Fexample.com%2F&token=x",
            "https://example.com/",
        )

    def test_amazon_raw_rule(self):
        """Test that the /ref= path segment is removed."""
        self.assertCleaned(
            "https://www.amazon.com/gp/B08CH7RHDP/ref=as_li_ss_tl",
            "https://www.amazon.com/gp/B08CH7RHDP",
        )

    def test_amazon_referral_marketing(self):
        """Test that affiliate tags are only removed on request."""
        url = "https://www.amazon.com/dp/B0BCXLQNCC?tag=abc-20"

        self.assertUnchanged(url)
        stripping = self.cleaner.with_referral_marketing(True)
        self.assertEqual(stripping.clear_url(url), "https://www.amazon.com/dp/B0BCXLQNCC")

    def test_twitter_share_parameters(self):
        self.assertCleaned(
            "https://twitter.com/user/status/1?ref_src=twsrc%5Etfw&s=20",
            "https://twitter.com/user/status/1",
        )

    def test_exceptions(self):
        """Test that excepted URLs are left alone."""
        self.assertUnchanged(
            "https://myaccount.google.com/?utm_source=account-marketing-page"
            "&utm_medium=go-to-account-button"
        )
        self.assertUnchanged("https://gitlab.com/group/project?utm_source=x")

    def test_urls_without_tracking(self):
        """Test that clean URLs pass through untouched."""
        for url in (
            "http://example.com/?p1=value&p1=othervalue",
            "http://example.com/?p1=&p2=",
            "https://docs.julialang.org/en/v1/stdlib/REPL/#Key-bindings",
            "https://papers.ssrn.com/sol3/papers.cfm?abstract_id=1234567",
            "javascript:void(0)",
            "data:text/plain;base64,SGVsbG8sIFdvcmxkIQ==",
        ):
            with self.subTest(url=url):
                self.assertUnchanged(url)

    def test_empty_query(self):
        self.assertCleaned("http://example.com/?&&&&", "http://example.com/")


if __name__ == "__main__":
    unittest.main()
