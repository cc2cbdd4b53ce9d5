"""Unit tests for model answer normalization."""

import pytest

from domain_finder.core.domain.normalization import (
    is_not_found,
    normalize_domain_answer,
    strip_markdown_fences,
)


class TestNotFound:
    @pytest.mark.parametrize("text", ["NOT FOUND", "not found", " Not Found. ", '"NOT FOUND"'])
    def test_sentinel_variants(self, text):
        assert is_not_found(text)
        assert normalize_domain_answer(text) is None

    @pytest.mark.parametrize("text", [None, "", "   ", "```\n```"])
    def test_empty_answers(self, text):
        assert normalize_domain_answer(text) is None


class TestUrls:
    def test_full_url_kept(self):
        assert normalize_domain_answer("https://www.acme.com") == "https://www.acme.com"

    def test_http_url_kept(self):
        assert normalize_domain_answer("http://beta.io/en/") == "http://beta.io/en/"

    def test_trailing_period_removed(self):
        assert normalize_domain_answer("https://acme.com.") == "https://acme.com"

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("www.example.com", "https://www.example.com"),
            ("acme-robotics.de", "https://acme-robotics.de"),
            ("shop.acme.co.uk/home", "https://shop.acme.co.uk/home"),
        ],
    )
    def test_bare_domain_gets_scheme(self, text, expected):
        assert normalize_domain_answer(text) == expected

    def test_markdown_fence_unwrapped(self):
        assert normalize_domain_answer("```\nhttps://acme.com\n```") == "https://acme.com"
        assert normalize_domain_answer("```text\nacme.com```") == "https://acme.com"

    def test_wrapping_quotes_and_brackets_removed(self):
        assert normalize_domain_answer("<https://acme.com>") == "https://acme.com"
        assert normalize_domain_answer("`acme.com`") == "https://acme.com"

    def test_url_embedded_in_prose_extracted(self):
        answer = "The official website is https://www.acme.com/."
        assert normalize_domain_answer(answer) == "https://www.acme.com/"

    def test_unrecognized_prose_is_none(self):
        assert normalize_domain_answer("I could not determine the website") is None


def test_strip_markdown_fences():
    assert strip_markdown_fences("```json\nabc\n```") == "abc"
