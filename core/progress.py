"""
읽은 분량 갱신 정책

자동 인식과 수동 챕터 읽음 메시지가 공통으로 사용하는 진행도 결정 로직입니다.
라이브러리를 직접 수정하지 않고 ProgressDecision만 반환합니다 (적용은 오케스트레이터 담당).

규칙:
- 수동 수정(exact_num=True)은 기준을 적용한 값으로 덮어씀 (감소 포함)
- 자동 인식은 앞으로만 진행 (더 큰 값만 반영), 세 값이 모두 저장값 이하이면 아무것도 하지 않음
- PREVIOUS 설정이면 화면의 챕터/외전 번호에서 1을 뺌 (0 미만은 0)
- 완결 처리는 연재 상태가 Completed/Dropped 이거나 autocomplete_ongoing 설정일 때만
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from config.recognition_config import ChapterReadPreference
from core.novel import Novel, NovelStatus, ListStatus
from core.numeric_extractor import RecognitionData

# 완결 처리를 허용하는 연재 상태
AUTO_COMPLETE_STATUSES = (NovelStatus.COMPLETED, NovelStatus.DROPPED)


@dataclass(frozen=True)
class ProgressDecision:
    """진행도 결정 결과"""
    changed: bool
    volume: int = 0
    chapter: float = 0.0
    side_stories: int = 0
    list_moves: Tuple[ListStatus, ...] = ()
    reason: str = ""

    @property
    def final_list_status(self) -> Optional[ListStatus]:
        return self.list_moves[-1] if self.list_moves else None


def decide_progress(novel: Novel,
                    data: RecognitionData,
                    preference: ChapterReadPreference,
                    exact_num: bool,
                    autocomplete_ongoing: bool = False,
                    chapter_title_already_read: bool = False) -> ProgressDecision:
    """
    새 진행도 계산

    Args:
        novel: 현재 저장된 소설
        data: 추출된 번호
        preference: 챕터 읽음 기준
        exact_num: 사용자가 직접 지정한 값인지
        autocomplete_ongoing: 연재 중인 소설도 완결 처리 허용
        chapter_title_already_read: 같은 소설의 같은 챕터 제목이 이미 기록에 있는지

    Returns:
        ProgressDecision (changed=False면 아무것도 하지 않음)
    """
    if chapter_title_already_read:
        return ProgressDecision(changed=False, reason="chapter title already in history")

    stored = novel.content_read
    modifier = preference.read_modifier

    if not exact_num and data.chapter == 0 and data.reading and data.chapter_title:
        # 번호는 못 찾았지만 읽는 중이므로 다음 챕터로 간주
        new_chapter = stored.chapters + 1.0
        new_side = data.side_story - modifier
    else:
        new_chapter = data.chapter - modifier
        new_side = data.side_story - modifier

    new_chapter = max(0.0, float(new_chapter))
    new_side = max(0, int(new_side))
    new_volume = data.volume

    if (not exact_num
            and stored.chapters >= new_chapter
            and stored.volumes >= new_volume
            and stored.side_stories >= new_side):
        return ProgressDecision(changed=False, reason="not ahead of stored progress")

    if exact_num:
        volume, chapter, side = new_volume, new_chapter, new_side
    else:
        volume = max(stored.volumes, new_volume)
        chapter = max(stored.chapters, new_chapter)
        side = max(stored.side_stories, new_side)

    # 기록될 진행도 기준으로 완결 여부 판단
    can_complete = novel.status in AUTO_COMPLETE_STATUSES or autocomplete_ongoing
    is_completed = (
        volume >= novel.content.volumes
        and chapter >= novel.content.chapters
        and novel.content.chapters > 0
        and side >= novel.content.side_stories
        and can_complete
    )

    moves = []
    if not exact_num and novel.list_status == ListStatus.PLAN_TO_READ:
        moves.append(ListStatus.READING)
    if is_completed and novel.list_status != ListStatus.COMPLETED:
        moves.append(ListStatus.COMPLETED)

    return ProgressDecision(
        changed=True,
        volume=volume,
        chapter=chapter,
        side_stories=side,
        list_moves=tuple(moves),
        reason="completed" if is_completed else "progress"
    )
