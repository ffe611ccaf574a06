"""
Poll Scheduler

일정 주기로 창 제목 목록을 조회해 인식 대상 제목을 고르고, 분석 결과를 큐로 넘기는 작업 스레드입니다.

- 무시 키워드가 포함된 제목을 만나면 그 틱 전체를 중단 (다른 제목도 보지 않음)
- 인식 키워드가 포함된 첫 번째 제목을 선택
- 분석 결과는 queue.Queue로 단일 소비자(RecognitionOrchestrator)에게 전달
- 소비자가 처리를 끝냈다는 신호(ack)를 받은 뒤에 다음 틱을 시작
- 창 제목 조회 실패 시 해당 틱만 건너뜀
"""
import queue
import logging
import threading
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from config.recognition_config import RecognitionSettings
from core.errors import WindowTitleSourceError
from core.recognition_state import TitleObservation
from core.title_analyzer import TitleAnalyzer
from core.utils.title_utils import find_matching_keyword
from core.window_titles import WindowTitleSource

# ack 대기 중 중지 요청을 확인하는 주기 (초)
ACK_POLL_INTERVAL = 0.1


@dataclass
class PendingTick:
    """큐로 전달되는 틱 하나 (처리가 끝나면 done을 set)"""
    observation: TitleObservation
    done: threading.Event = field(default_factory=threading.Event)


def select_title(titles: Iterable[str], title_keywords: Sequence[str],
                 ignore_keywords: Sequence[str]) -> Optional[str]:
    """
    창 제목 목록에서 인식 대상 제목 선택

    Returns:
        인식 키워드가 포함된 첫 번째 제목, 무시 키워드를 만나면 None
    """
    for title in titles:
        if find_matching_keyword(title, ignore_keywords) is not None:
            return None
        if find_matching_keyword(title, title_keywords) is not None:
            return title
    return None


class PollScheduler:
    """창 제목 조회 작업 스레드"""

    def __init__(self, title_source: WindowTitleSource, analyzer: TitleAnalyzer,
                 settings: RecognitionSettings, outbox: "queue.Queue[PendingTick]",
                 logger=None):
        """
        Args:
            title_source: 창 제목 제공자
            analyzer: 제목 분석기
            settings: 인식 설정 (틱마다 스냅샷을 떠서 사용)
            outbox: 소비자에게 넘길 큐
            logger: 로거 (RecognitionLogger 또는 logging.Logger)
        """
        self.title_source = title_source
        self.analyzer = analyzer
        self.settings = settings
        self.outbox = outbox
        self.logger = logger or logging.getLogger(__name__)

        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    @property
    def interval(self) -> float:
        return self.settings.poll_interval

    def start(self) -> None:
        """작업 스레드 시작 (이미 실행 중이면 무시)"""
        if self.is_running():
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._poll_loop,
            daemon=True,
            name="NovelRecognitionPoller"
        )
        self._thread.start()
        self.logger.info(f"[PollScheduler] started (every {self.interval}s)")

    def stop(self) -> None:
        """
        중지 신호를 보내고 스레드가 끝날 때까지 대기

        진행 중인 창 제목 조회가 끝나야 반환되므로, 반환 후에는 이전 작업 스레드가 남아 있지 않습니다.
        """
        self._stop_event.set()
        if self._thread is not None:
            if self._thread is not threading.current_thread():
                self._thread.join()
            self._thread = None
            self.logger.info("[PollScheduler] stopped")

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> Optional[PendingTick]:
        """
        틱 하나 실행 (창 제목 조회 → 선택 → 분석 → 큐에 추가)

        Returns:
            큐에 넣은 PendingTick, 창 제목 조회에 실패하면 None
        """
        settings = self.settings.snapshot()

        try:
            titles = self.title_source.list_open_window_titles()
        except WindowTitleSourceError as e:
            self.logger.warning(f"[PollScheduler] 창 제목 조회 실패, 틱 건너뜀: {e}")
            return None

        title = select_title(titles, settings.title_keywords, settings.ignore_keywords)
        self.logger.debug(f"[PollScheduler] window_title => {title!r}")

        tick = PendingTick(observation=self.analyzer.analyze(title, settings))
        self.outbox.put(tick)
        return tick

    def _poll_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                tick = self.run_once()
                if tick is not None:
                    self._wait_for_ack(tick)
            except Exception as e:
                self.logger.exception(f"[PollScheduler] 틱 처리 중 오류: {e}")

            self._stop_event.wait(self.interval)

    def _wait_for_ack(self, tick: PendingTick) -> bool:
        """소비자가 틱 처리를 끝낼 때까지 대기 (중지 요청이 오면 False)"""
        while not self._stop_event.is_set():
            if tick.done.wait(ACK_POLL_INTERVAL):
                return True
        return False
