"""
창 제목 정리/토큰 분리 테스트
"""
import pytest

from core.title_parser import sanitize_title, tokenize_title


class TestSanitizeTitle:
    """sanitize_title 테스트"""

    def test_none_passes_through(self):
        assert sanitize_title(None) is None

    def test_dash_variants_become_hyphen(self):
        assert sanitize_title("A – B — C | D") == "A - B - C - D"

    def test_epub_is_removed(self):
        assert sanitize_title("My Novel.epub - Foliate") == "My Novel - Foliate"

    @pytest.mark.parametrize("raw", [
        "",
        "Plain title",
        "x.ep.epubub - Reader",
        "A ｜ B ― C",
        "Novel – Chapter 3 | Royal Road - Mozilla Firefox",
    ])
    def test_idempotent(self, raw):
        once = sanitize_title(raw)
        assert sanitize_title(once) == once

    def test_nested_epub_fully_removed(self):
        assert ".epub" not in sanitize_title("x.ep.epubub")


class TestTokenizeTitle:
    """tokenize_title 테스트"""

    def test_empty_returns_none(self):
        assert tokenize_title("") is None
        assert tokenize_title(None) is None

    def test_no_delimiter_returns_none(self):
        assert tokenize_title("Desktop") is None
        assert tokenize_title("A- B") is None

    def test_tokens_are_trimmed_and_ordered(self):
        assert tokenize_title("  A  -  B - C ") == ["A", "B", "C"]

    def test_royal_road_title_has_four_segments(self):
        title = sanitize_title("My Cool Novel - Chapter 12 - Royal Road - Mozilla Firefox")
        tokens = tokenize_title(title)
        assert tokens == ["My Cool Novel", "Chapter 12", "Royal Road", "Mozilla Firefox"]
