"""
사이트 판별 / 출처·제목 추정 테스트
"""
from core.sites import KnownSite, detect_site, clamp_index
from core.title_guesser import (
    UNKNOWN,
    is_reading_chapter,
    guess_source,
    guess_novel_name,
    find_chapter_title,
)

ROYAL_ROAD_TOKENS = ["My Cool Novel", "Chapter 12", "Royal Road", "Mozilla Firefox"]


class TestDetectSite:

    def test_case_insensitive(self):
        assert detect_site(["x", "ROYAL ROAD"]) is KnownSite.ROYAL_ROAD
        assert detect_site(["Novel", "scribblehub"]) is KnownSite.SCRIBBLE_HUB

    def test_generic_when_unknown(self):
        assert detect_site(["Foo", "Bar"]) is KnownSite.GENERIC
        assert detect_site([]) is KnownSite.GENERIC

    def test_clamp_index(self):
        assert clamp_index(-3, 4) == 0
        assert clamp_index(10, 4) == 3
        assert clamp_index(0, 0) is None


class TestIsReadingChapter:

    def test_royal_road_needs_four_tokens(self):
        assert is_reading_chapter(ROYAL_ROAD_TOKENS)
        assert not is_reading_chapter(["Fiction", "Royal Road", "Mozilla Firefox"])

    def test_wuxiaworld_needs_three_tokens(self):
        assert is_reading_chapter(["Novel", "Something", "WuxiaWorld"])
        assert not is_reading_chapter(["Novel", "WuxiaWorld"])

    def test_generic_chapter_token(self):
        assert is_reading_chapter(["Some Novel", "Ch.5", "Reader"])
        assert is_reading_chapter(["Some Novel", "chapter five", "Reader"])
        assert not is_reading_chapter(["Home", "Google Chrome"])


class TestGuessSource:

    def test_empty(self):
        assert guess_source([]) == UNKNOWN

    def test_firefox_offset(self):
        assert guess_source(ROYAL_ROAD_TOKENS) == "Royal Road"

    def test_microsoft_offset(self):
        tokens = ["Novel", "Ch 3", "Site", "Personal", "Microsoft Edge"]
        assert guess_source(tokens) == "Site"

    def test_short_list_clamps(self):
        assert guess_source(["Microsoft Edge"]) == "Microsoft Edge"

    def test_falls_back_to_last_token(self):
        assert guess_source(["Novel", "Chapter 1", "Foliate"]) == "Foliate"


class TestGuessNovelName:

    def test_empty(self):
        assert guess_novel_name([]) == UNKNOWN

    def test_royal_road_uses_index_one(self):
        assert guess_novel_name(ROYAL_ROAD_TOKENS) == "Chapter 12"

    def test_royal_road_not_reading_uses_first(self):
        assert guess_novel_name(["Foo", "Royal Road", "Mozilla Firefox"]) == "Foo"

    def test_generic_uses_first(self):
        assert guess_novel_name(["Some Novel", "Chapter 5", "Google Chrome"]) == "Some Novel"

    def test_bad_reader_uses_index_one(self):
        assert guess_novel_name(["Ch 5", "Novel X", "Bad Reader"]) == "Novel X"


class TestFindChapterTitle:

    def test_royal_road(self):
        assert find_chapter_title(ROYAL_ROAD_TOKENS) == "My Cool Novel"

    def test_scribble_hub(self):
        assert find_chapter_title(["Novel", "The Beginning", "Scribble Hub"]) == "The Beginning"

    def test_generic_has_none(self):
        assert find_chapter_title(["Novel", "Chapter 1", "Foliate"]) is None
        assert find_chapter_title([]) is None
