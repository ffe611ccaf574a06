"""
Recognition Orchestrator

소설 인식 시스템 전체를 조율하는 단일 소비자입니다.
PollScheduler(작업 스레드) → queue.Queue → RecognitionOrchestrator(소비자) 구조로 동작합니다.

핵심 기능:
- CurrentlyReading 상태의 유일한 소유자 (상태 전이는 이 객체에서만 실행)
- 상태 머신이 반환한 명령을 라이브러리/화면 표시 대상에 적용
- 읽기 전용 스냅샷(CurrentlyReadingSnapshot) 공개
- 인식 켜기/끄기/재시작 (작업 스레드는 중지 신호 후 join)
- 수동 챕터 읽음 메시지 처리
"""
import time
import queue
import threading
from dataclasses import dataclass, replace
from typing import Callable, List, Optional

from config.recognition_config import RecognitionSettings
from core.display import DisplaySink, LoggingDisplaySink
from core.errors import NovelNotFoundError
from core.library import NovelLibrary
from core.novel import Novel, NovelStatus, ChapterRead
from core.novel_matcher import NovelMatcher
from core.numeric_extractor import RecognitionData
from core.poll_scheduler import PollScheduler, PendingTick
from core.progress import decide_progress
from core.recognition_logger import RecognitionLogger
from core.recognition_state import (
    CurrentlyReading,
    ReadingState,
    RecognitionStateMachine,
    TitleObservation,
    PublishNotReading,
    PublishReadingNow,
    PublishSuggestions,
    CommitProgress,
    WaitForConfirmation,
    NavigateToReadingView,
)
from core.title_analyzer import TitleAnalyzer
from core.window_titles import WindowTitleSource

# run_forever에서 큐를 확인하는 주기 (초)
QUEUE_POLL_INTERVAL = 0.1


@dataclass(frozen=True)
class CurrentlyReadingSnapshot:
    """읽기 전용 현재 상태 (UI 등 다른 스레드에서 참조)"""
    state: ReadingState = ReadingState.IDLE
    novel: Optional[Novel] = None
    title_key: Optional[str] = None
    confirm_deadline: Optional[float] = None
    enabled: bool = False


class RecognitionOrchestrator:
    """소설 인식 메인 컨트롤러"""

    def __init__(
        self,
        library: NovelLibrary,
        settings: RecognitionSettings,
        title_source: WindowTitleSource,
        display: Optional[DisplaySink] = None,
        logger: Optional[RecognitionLogger] = None,
        clock: Optional[Callable[[], float]] = None
    ):
        """
        Args:
            library: 소설 라이브러리
            settings: 인식 설정
            title_source: 창 제목 제공자
            display: 화면 표시 대상 (없으면 로그 출력)
            logger: 로거 (없으면 기본 로거 생성)
            clock: 현재 시각 함수 (테스트용, 기본 time.time)
        """
        self.library = library
        self.settings = settings
        self.title_source = title_source
        self.logger = logger or RecognitionLogger(log_level=settings.log_level)
        self.display = display or LoggingDisplaySink(self.logger)
        self.clock = clock or time.time

        self.matcher = NovelMatcher(library, settings.fuzzy_threshold, self.logger)
        self.analyzer = TitleAnalyzer(self.matcher, logger=self.logger)
        self.queue: "queue.Queue[PendingTick]" = queue.Queue()

        self._state = CurrentlyReading()
        self._snapshot_lock = threading.Lock()
        self._snapshot = CurrentlyReadingSnapshot()
        self._scheduler: Optional[PollScheduler] = None
        self._last_chapter_read: Optional[ChapterRead] = None

    # ---------- 상태 ----------

    @property
    def state(self) -> CurrentlyReading:
        return self._state

    def snapshot(self) -> CurrentlyReadingSnapshot:
        with self._snapshot_lock:
            return self._snapshot

    def _publish_snapshot(self):
        snapshot = CurrentlyReadingSnapshot(
            state=self._state.state,
            novel=self._state.candidate,
            title_key=self._state.title_key,
            confirm_deadline=self._state.confirm_deadline,
            enabled=self.is_running()
        )
        with self._snapshot_lock:
            self._snapshot = snapshot

    # ---------- 스케줄러 제어 ----------

    def _make_scheduler(self) -> PollScheduler:
        return PollScheduler(
            title_source=self.title_source,
            analyzer=self.analyzer,
            settings=self.settings,
            outbox=self.queue,
            logger=self.logger
        )

    def is_running(self) -> bool:
        return self._scheduler is not None and self._scheduler.is_running()

    def start(self) -> bool:
        """인식 시작 (설정에서 꺼져 있으면 시작하지 않음)"""
        if not self.settings.enable:
            self.logger.info("Novel recognition disabled")
            return False
        if self.is_running():
            return True

        self._scheduler = self._make_scheduler()
        self._scheduler.start()
        self.logger.log_scheduler_start(self.settings.poll_interval)
        self._publish_snapshot()
        return True

    def stop(self):
        """인식 중지 (작업 스레드 join 후 대기 중인 틱 폐기, 상태 초기화)"""
        if self._scheduler is not None:
            self._scheduler.stop()
            self._scheduler = None
            self.logger.log_scheduler_stop(self.settings.poll_interval)

        self._discard_pending()

        if not self._state.is_clear:
            self.display.publish_not_reading()
        self._state = CurrentlyReading()
        self._publish_snapshot()

    def toggle(self) -> bool:
        """
        인식 켜기/끄기

        Returns:
            변경 후 enable 값
        """
        self.settings.enable = not self.settings.enable
        if self.settings.enable:
            self.start()
        else:
            self.stop()
        return self.settings.enable

    def restart(self, settings: RecognitionSettings):
        """
        새 설정으로 재시작

        이전 작업 스레드를 완전히 종료(join)한 뒤에 새 스레드를 시작합니다.
        실행 중이 아니었다면 설정만 교체합니다.
        """
        was_running = self.is_running()
        if self._scheduler is not None:
            self._scheduler.stop()
            self._scheduler = None
        self._discard_pending()

        self.settings = settings
        self.matcher.threshold = settings.fuzzy_threshold

        if was_running:
            self.start()
        else:
            self._publish_snapshot()

    def _discard_pending(self):
        while True:
            try:
                tick = self.queue.get_nowait()
            except queue.Empty:
                break
            tick.done.set()

    # ---------- 틱 처리 (소비자 스레드 전용) ----------

    def poll_once(self) -> int:
        """틱 하나를 현재 스레드에서 실행하고 처리"""
        self._make_scheduler().run_once()
        return self.process_pending()

    def process_pending(self) -> int:
        """
        큐에 쌓인 틱을 모두 처리

        Returns:
            처리한 틱 수
        """
        processed = 0
        while True:
            try:
                tick = self.queue.get_nowait()
            except queue.Empty:
                break
            self._handle_tick(tick)
            processed += 1
        return processed

    def run_forever(self, stop_event: threading.Event):
        """stop_event가 set될 때까지 큐를 처리"""
        while not stop_event.is_set():
            try:
                tick = self.queue.get(timeout=QUEUE_POLL_INTERVAL)
            except queue.Empty:
                continue
            self._handle_tick(tick)

    def _handle_tick(self, tick: PendingTick):
        try:
            self.handle_observation(tick.observation)
        except Exception as e:
            self.logger.exception(f"[Orchestrator] 틱 처리 중 오류: {e}")
        finally:
            tick.done.set()

    def handle_observation(self, observation: TitleObservation, now: Optional[float] = None) -> List[object]:
        """
        관측 결과 하나를 상태 머신에 적용하고 명령 실행

        Returns:
            실행한 명령 목록
        """
        settings = observation.settings or self.settings.snapshot()
        now = self.clock() if now is None else now

        self.logger.log_tick(observation.title)
        self._state, commands = RecognitionStateMachine.step(self._state, observation, settings, now)

        if observation.novel is not None and any(isinstance(c, PublishReadingNow) for c in commands):
            self.logger.log_match(observation.title, observation.novel.title, observation.match_tier)

        for command in commands:
            self._execute(command, settings)

        self._publish_snapshot()
        return commands

    def _execute(self, command, settings: RecognitionSettings):
        if isinstance(command, CommitProgress):
            updated = self._apply_progress(command.novel.id, command.data, command.exact_num, settings)
            if updated is not None and self._state.candidate is not None \
                    and self._state.candidate.id == updated.id:
                self._state = replace(self._state, candidate=updated)
        elif isinstance(command, WaitForConfirmation):
            self.logger.log_wait(command.seconds_left)
        elif isinstance(command, PublishReadingNow):
            novel = command.novel
            if novel is not None:
                # 같은 틱에서 기록된 진행도를 반영
                if self._state.candidate is not None and self._state.candidate.id == novel.id:
                    novel = self._state.candidate
            self.display.publish_reading_now(command.data, novel, command.novel_name, command.source)
        elif isinstance(command, PublishSuggestions):
            self.display.publish_suggestions(command.keyword, list(command.candidates))
        elif isinstance(command, PublishNotReading):
            self.display.publish_not_reading()
        elif isinstance(command, NavigateToReadingView):
            self.display.request_navigate_to_reading_view()
        else:
            self.logger.warning(f"[Orchestrator] 알 수 없는 명령: {command!r}")

    # ---------- 진행도 ----------

    def _apply_progress(self, novel_id: str, data: RecognitionData, exact_num: bool,
                        settings: RecognitionSettings) -> Optional[Novel]:
        """진행도 정책을 적용해 라이브러리에 기록 (소설이 없어졌으면 None)"""
        novel = self.library.get_by_id(novel_id)
        if novel is None:
            self.logger.warning(f"[Orchestrator] 진행도 기록 실패: {NovelNotFoundError(novel_id)}")
            return None

        already_read = bool(
            data.chapter_title
            and self.library.history.find_chapter_title(data.chapter_title, novel.id)
        )

        decision = decide_progress(
            novel,
            data,
            settings.chapter_read_preference,
            exact_num,
            autocomplete_ongoing=settings.autocomplete_ongoing,
            chapter_title_already_read=already_read
        )
        if not decision.changed:
            self.logger.debug(f"[Orchestrator] {novel.title}: 진행도 변경 없음 ({decision.reason})")
            return novel

        updated = self.library.commit_progress(
            novel.id,
            decision.volume,
            decision.chapter,
            decision.side_stories,
            exact=exact_num,
            chapter_title=data.chapter_title
        )
        # Plan to read → Reading → Completed 순서로 한 단계씩 이동
        for list_status in decision.list_moves:
            self.logger.info(f"[Orchestrator] {updated.title}: {updated.list_status.value} → {list_status.value}")
            updated = self.library.move_to_list(novel.id, list_status)
        self.logger.log_commit(updated.title, decision.volume, decision.chapter, decision.side_stories)
        return updated

    def chapter_read(self, message: ChapterRead) -> Optional[Novel]:
        """
        수동 챕터 읽음 메시지 처리 (소비자 스레드 전용)

        - 직전 메시지와 같으면 무시
        - 저장된 진행도와 같으면 무시

        Returns:
            갱신된 Novel, 무시했으면 None
        """
        if message.same_as(self._last_chapter_read):
            return None
        self._last_chapter_read = message

        novel = self.library.get_by_id(message.novel.id)
        if novel is None:
            raise NovelNotFoundError(message.novel.id)

        stored = novel.content_read
        if (stored.volumes == message.volume
                and abs(stored.chapters - message.chapter) < 1e-6
                and stored.side_stories == message.side):
            return None

        data = RecognitionData(
            volume=message.volume,
            chapter=message.chapter,
            side_story=message.side,
            reading=True
        )
        updated = self._apply_progress(novel.id, data, message.exact_num, self.settings.snapshot())
        if updated is not None and self._state.candidate is not None \
                and self._state.candidate.id == updated.id:
            self._state = replace(self._state, candidate=updated)
            self._publish_snapshot()
        return updated

    def mark_status(self, novel_id: str, status: NovelStatus) -> Novel:
        """연재 상태 변경 (Completed/Dropped로 바꾸면 이후 자동 완결 처리 대상)"""
        novel = self.library.mark_status(novel_id, status)
        self.logger.info(f"[Orchestrator] {novel.title}: status → {status.value}")
        if self._state.candidate is not None and self._state.candidate.id == novel.id:
            self._state = replace(self._state, candidate=novel)
            self._publish_snapshot()
        return novel

    def add_recognition_keyword(self, novel_id: str, keyword: str) -> Novel:
        """제안 목록에서 선택한 소설에 인식 키워드 추가"""
        novel = self.library.add_recognition_keyword(novel_id, keyword)
        self.logger.info(f"[Orchestrator] {novel.title}: keyword added {keyword!r}")
        return novel
