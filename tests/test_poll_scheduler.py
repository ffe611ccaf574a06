"""
PollScheduler 테스트

제목 선택 규칙(무시 키워드 우선), 틱 실행, 조회 실패 처리, 스레드 시작/중지를 검증합니다.
"""
import queue
import threading
import time
from unittest.mock import Mock

import pytest

from config.recognition_config import RecognitionSettings
from core.errors import WindowTitleSourceError
from core.library import NovelLibrary
from core.novel_matcher import NovelMatcher
from core.poll_scheduler import PollScheduler, select_title
from core.recognition_state import TitleObservation
from core.title_analyzer import TitleAnalyzer
from core.window_titles import StaticWindowTitleSource, WindowTitleSource

TITLE_KEYWORDS = ["Chapter", "Novel Updates", "Royal Road", "Scribble Hub"]
IGNORE_KEYWORDS = ["Manga", "Manhua", "Manhwa"]

ROYAL_ROAD_TITLE = "My Cool Novel - Chapter 12 - Royal Road - Mozilla Firefox"


class TestSelectTitle:

    def test_first_include_match(self):
        titles = ["Terminal", ROYAL_ROAD_TITLE, "Other - Chapter 3 - Site"]
        assert select_title(titles, TITLE_KEYWORDS, IGNORE_KEYWORDS) == ROYAL_ROAD_TITLE

    def test_include_is_case_insensitive(self):
        assert select_title(["foo - royal road"], TITLE_KEYWORDS, []) == "foo - royal road"

    def test_ignore_short_circuits_whole_scan(self):
        titles = ["Some Manga - Chapter 3 - MangaDex", ROYAL_ROAD_TITLE]
        assert select_title(titles, TITLE_KEYWORDS, IGNORE_KEYWORDS) is None

    def test_ignore_keyword_alone_stops_scan(self):
        titles = ["manhwa list", ROYAL_ROAD_TITLE]
        assert select_title(titles, TITLE_KEYWORDS, IGNORE_KEYWORDS) is None

    def test_placeholder_keywords(self):
        titles = ["Novel - Ch 12 - Reader"]
        assert select_title(titles, ["Ch <num>"], []) == "Novel - Ch 12 - Reader"
        assert select_title(titles, ["C<any> 12"], []) == "Novel - Ch 12 - Reader"
        assert select_title(["Novel - Ch x - Reader"], ["Ch <num>"], []) is None

    def test_nothing_matches(self):
        assert select_title(["Terminal", "Files"], TITLE_KEYWORDS, IGNORE_KEYWORDS) is None
        assert select_title([], TITLE_KEYWORDS, IGNORE_KEYWORDS) is None


@pytest.fixture
def analyzer(sample_novels, quiet_logger):
    return TitleAnalyzer(NovelMatcher(NovelLibrary(sample_novels)), logger=quiet_logger)


class TestRunOnce:

    def test_posts_observation(self, analyzer, quiet_logger):
        outbox = queue.Queue()
        scheduler = PollScheduler(StaticWindowTitleSource([ROYAL_ROAD_TITLE]), analyzer,
                                  RecognitionSettings(), outbox, quiet_logger)
        tick = scheduler.run_once()
        assert outbox.get_nowait() is tick
        observation = tick.observation
        assert observation.title == ROYAL_ROAD_TITLE
        assert observation.data.chapter == 12.0
        assert observation.source == "Royal Road"
        assert observation.novel_name == "Chapter 12"
        assert observation.settings is not None

    def test_ignored_tick_posts_empty_observation(self, analyzer, quiet_logger):
        outbox = queue.Queue()
        titles = ["Some Manga - Chapter 3 - MangaDex", ROYAL_ROAD_TITLE]
        scheduler = PollScheduler(StaticWindowTitleSource(titles), analyzer,
                                  RecognitionSettings(), outbox, quiet_logger)
        tick = scheduler.run_once()
        assert tick.observation.title is None

    def test_source_failure_skips_tick(self, analyzer, quiet_logger):
        source = Mock(spec=WindowTitleSource)
        source.list_open_window_titles.side_effect = WindowTitleSourceError("no display")
        outbox = queue.Queue()
        scheduler = PollScheduler(source, analyzer, RecognitionSettings(), outbox, quiet_logger)
        assert scheduler.run_once() is None
        assert outbox.empty()

    def test_settings_snapshot_per_tick(self, analyzer, quiet_logger):
        settings = RecognitionSettings()
        outbox = queue.Queue()
        scheduler = PollScheduler(StaticWindowTitleSource([ROYAL_ROAD_TITLE]), analyzer,
                                  settings, outbox, quiet_logger)
        tick = scheduler.run_once()
        settings.delay = 5
        assert tick.observation.settings.delay == 120


class TestThread:

    def test_start_and_stop(self, analyzer, quiet_logger):
        outbox = queue.Queue()
        scheduler = PollScheduler(StaticWindowTitleSource([ROYAL_ROAD_TITLE]), analyzer,
                                  RecognitionSettings(poll_interval=1), outbox, quiet_logger)
        scheduler.start()
        try:
            assert scheduler.is_running()
            tick = outbox.get(timeout=5)
            assert isinstance(tick.observation, TitleObservation)
            tick.done.set()
        finally:
            scheduler.stop()
        assert not scheduler.is_running()

    def test_next_tick_waits_for_ack(self, analyzer, quiet_logger):
        outbox = queue.Queue()
        scheduler = PollScheduler(StaticWindowTitleSource([ROYAL_ROAD_TITLE]), analyzer,
                                  RecognitionSettings(poll_interval=1), outbox, quiet_logger)
        scheduler.start()
        try:
            outbox.get(timeout=5)
            # ack를 보내지 않았으므로 다음 틱은 큐에 들어오지 않음
            with pytest.raises(queue.Empty):
                outbox.get(timeout=1.5)
        finally:
            scheduler.stop()
        assert not scheduler.is_running()


class SlowTitleSource(WindowTitleSource):
    """조회에 시간이 걸리는 창 제목 제공자"""

    def __init__(self, delay):
        self.delay = delay
        self.entered = threading.Event()

    def list_open_window_titles(self):
        self.entered.set()
        time.sleep(self.delay)
        return [ROYAL_ROAD_TITLE]


class TestStopJoinsWorker:

    def test_stop_waits_for_in_flight_query(self, analyzer, quiet_logger):
        outbox = queue.Queue()
        source = SlowTitleSource(delay=1.0)
        scheduler = PollScheduler(source, analyzer, RecognitionSettings(poll_interval=1),
                                  outbox, quiet_logger)
        scheduler.start()
        worker = scheduler._thread
        assert source.entered.wait(5)

        scheduler.stop()
        assert not worker.is_alive()
        assert not scheduler.is_running()

    def test_restart_leaves_single_worker(self, analyzer, quiet_logger):
        outbox = queue.Queue()
        source = SlowTitleSource(delay=0.5)
        scheduler = PollScheduler(source, analyzer, RecognitionSettings(poll_interval=1),
                                  outbox, quiet_logger)
        scheduler.start()
        assert source.entered.wait(5)
        scheduler.stop()
        scheduler.start()
        try:
            workers = [t for t in threading.enumerate()
                       if t.name == "NovelRecognitionPoller" and t.is_alive()]
            assert workers == [scheduler._thread]
        finally:
            scheduler.stop()
