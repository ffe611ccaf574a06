"""
TitleAnalyzer 테스트 (창 제목 → TitleObservation)
"""
import pytest

from core.library import NovelLibrary
from core.novel_matcher import NovelMatcher
from core.title_analyzer import TitleAnalyzer


@pytest.fixture
def analyzer(sample_novels):
    return TitleAnalyzer(NovelMatcher(NovelLibrary(sample_novels)))


def test_exact_title_token(analyzer, settings):
    observation = analyzer.analyze(
        "Chapter 12: The Fall - Mother of Learning - Royal Road - Mozilla Firefox", settings)
    assert observation.novel.id == "mol"
    assert observation.match_tier == "exact_title"
    assert observation.novel_name == "Mother of Learning"
    assert observation.source == "Royal Road"
    assert observation.data.chapter == 12.0
    assert observation.settings is settings


def test_keyword_token(analyzer, settings):
    observation = analyzer.analyze("MoL - Chapter 3 - Mozilla Firefox", settings)
    assert observation.novel.id == "mol"
    assert observation.match_tier == "exact_keyword"
    assert observation.novel_name == "MoL"


def test_fuzzy_guessed_name(analyzer, settings):
    observation = analyzer.analyze("The Wandering In - Chapter 3 - Mozilla Firefox", settings)
    assert observation.novel.id == "twi"
    assert observation.match_tier == "fuzzy"
    assert observation.novel_name == "The Wandering In"


def test_unknown_novel_gets_suggestion_keyword(analyzer, settings):
    observation = analyzer.analyze("Unknown Story - Chapter 3 - Mozilla Firefox", settings)
    assert observation.novel is None
    assert observation.suggestion_keyword == "Unknown"
    assert observation.match_tier == "none"


@pytest.mark.parametrize("raw", [None, "Terminal", ""])
def test_no_delimiter_is_nothing(analyzer, settings, raw):
    observation = analyzer.analyze(raw, settings)
    assert observation.title is None
    assert observation.novel is None


def test_epub_suffix_removed(analyzer, settings):
    observation = analyzer.analyze("Mother of Learning - Chapter 5.epub", settings)
    assert observation.title == "Mother of Learning - Chapter 5"
    assert observation.novel.id == "mol"
