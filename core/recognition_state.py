"""
인식 상태 머신

틱마다 (현재 상태, 관측 결과) → (새 상태, 명령 목록)을 계산하는 순수 함수입니다.
입출력은 하지 않고, 화면 갱신/진행도 기록 같은 부수 효과는 명령(Command)으로만 반환합니다.
명령 실행은 단일 소비자인 RecognitionOrchestrator가 담당합니다.

상태:
    IDLE      → 후보 소설 없음
    PENDING   → 후보 소설 있음, 확인 대기 중 (delay 초가 지나기 전)
    CONFIRMED → 대기 시간이 지나 진행도를 기록함

같은 제목 + 같은 매칭 여부(dedupe key)가 연속되고 이미 기록까지 끝났다면 아무것도 하지 않습니다.
"""
from enum import Enum
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from config.recognition_config import RecognitionSettings
from core.novel import Novel
from core.numeric_extractor import RecognitionData


class ReadingState(Enum):
    IDLE = "idle"
    PENDING = "pending"
    CONFIRMED = "confirmed"


@dataclass(frozen=True)
class CurrentlyReading:
    """
    현재 읽는 중인 소설 상태 (불변 객체, 틱마다 새로 만들어짐)

    Attributes:
        candidate: 후보 소설
        title_key: 마지막으로 처리한 "{제목}-{매칭 여부}" 키
        confirm_deadline: 진행도를 기록할 수 있는 시각 (epoch 초)
        deadline_consumed: 대기 시간이 소비되어 진행도 기록이 끝났는지
    """
    candidate: Optional[Novel] = None
    title_key: Optional[str] = None
    confirm_deadline: Optional[float] = None
    deadline_consumed: bool = False

    @property
    def state(self) -> ReadingState:
        if self.candidate is None:
            return ReadingState.IDLE
        if self.deadline_consumed:
            return ReadingState.CONFIRMED
        return ReadingState.PENDING

    @property
    def is_clear(self) -> bool:
        return self.candidate is None and self.title_key is None and self.confirm_deadline is None


@dataclass(frozen=True)
class TitleObservation:
    """
    틱 하나의 분석 결과 (작업 스레드에서 만들어져 소비자에게 전달됨)

    title이 None이면 읽는 중인 창이 없거나 제목 형태를 인식하지 못한 경우입니다.
    """
    title: Optional[str]
    data: RecognitionData = field(default_factory=RecognitionData)
    novel: Optional[Novel] = None
    novel_name: str = "?"
    source: str = "?"
    suggestion_keyword: str = ""
    suggestions: Tuple[Novel, ...] = ()
    match_tier: str = "none"
    settings: Optional[RecognitionSettings] = None

    @classmethod
    def nothing(cls, settings: Optional[RecognitionSettings] = None) -> 'TitleObservation':
        return cls(title=None, settings=settings)


# ---------- 명령 ----------

@dataclass(frozen=True)
class PublishNotReading:
    """'읽는 중 아님' 화면 표시"""


@dataclass(frozen=True)
class PublishReadingNow:
    data: RecognitionData
    novel: Optional[Novel]
    novel_name: str
    source: str


@dataclass(frozen=True)
class PublishSuggestions:
    keyword: str
    candidates: Tuple[Novel, ...]


@dataclass(frozen=True)
class CommitProgress:
    novel: Novel
    data: RecognitionData
    exact_num: bool = False


@dataclass(frozen=True)
class WaitForConfirmation:
    novel: Novel
    seconds_left: float


@dataclass(frozen=True)
class NavigateToReadingView:
    """'읽는 중' 화면으로 이동 요청"""


def make_title_key(title: str, novel_found: bool) -> str:
    return f"{title}-{str(novel_found).lower()}"


class RecognitionStateMachine:
    """CurrentlyReading 상태 전이"""

    @staticmethod
    def step(state: CurrentlyReading,
             event: TitleObservation,
             settings: RecognitionSettings,
             now: float) -> Tuple[CurrentlyReading, List[object]]:
        """
        틱 하나를 처리

        Args:
            state: 현재 상태
            event: 관측 결과
            settings: 틱 시작 시점의 설정 스냅샷
            now: 현재 시각 (epoch 초)

        Returns:
            (새 상태, 명령 목록)
        """
        commands: List[object] = []

        if event.title is None:
            if state.is_clear:
                return state, commands
            commands.append(PublishNotReading())
            # 기록이 끝난 상태로 초기화 (다음 제목이 오면 새로 대기)
            return CurrentlyReading(deadline_consumed=True), commands

        novel = event.novel
        held = state.candidate

        if novel is not None:
            same_novel = held is not None and held.id == novel.id
        else:
            same_novel = held is None

        if not same_novel:
            # 후보가 바뀌면 진행 중이던 대기도 초기화
            state = replace(state, candidate=novel, confirm_deadline=None, deadline_consumed=False)
        elif novel is not None:
            # 최신 진행도를 가진 객체로 교체
            state = replace(state, candidate=novel)

        title_key = make_title_key(event.title, novel is not None)
        already_done = state.title_key == title_key
        state = replace(state, title_key=title_key)

        if already_done and state.deadline_consumed:
            return state, commands

        committed = False
        if novel is not None:
            if state.confirm_deadline is None:
                state = replace(state, confirm_deadline=now + settings.delay, deadline_consumed=False)
            elif now >= state.confirm_deadline:
                commands.append(CommitProgress(novel=novel, data=event.data, exact_num=False))
                # 같은 소설이 유지되는 동안은 대기 시간을 다시 적용하지 않음
                state = replace(state, deadline_consumed=True)
                committed = True
            else:
                commands.append(WaitForConfirmation(novel=novel, seconds_left=state.confirm_deadline - now))
        elif not already_done:
            commands.append(PublishSuggestions(keyword=event.suggestion_keyword,
                                               candidates=tuple(event.suggestions)))

        # 대기 중인 틱은 화면을 다시 그리지 않고, 기록한 틱은 새 진행도를 표시
        if already_done and not committed:
            return state, commands

        commands.append(PublishReadingNow(
            data=event.data,
            novel=novel,
            novel_name=event.novel_name,
            source=event.source
        ))

        if already_done:
            return state, commands

        if (novel is None and settings.when_not_novel_go_to_reading) or \
                (novel is not None and settings.when_novel_go_to_reading):
            commands.append(NavigateToReadingView())

        return state, commands
