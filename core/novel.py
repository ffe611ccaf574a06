"""
Novel 데이터 모델

라이브러리에 등록된 소설과 읽기 진행도를 담는 데이터 객체입니다.
인식 엔진은 Novel을 조회 대상으로만 사용하고, 진행도 변경은 라이브러리를 통해 수행합니다.
"""
import re
import json
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List


class NovelStatus(Enum):
    """소설 연재 상태 (목록 상태와는 별개)"""
    ONGOING = "Ongoing"
    ORIGINAL_COMPLETED = "Original completed"
    COMPLETED = "Completed"
    HIATUS = "Hiatus"
    ABANDONED = "Abandoned"
    DROPPED = "Dropped"
    OTHER = "Other"

    @classmethod
    def from_str(cls, value: str) -> 'NovelStatus':
        for status in cls:
            if status.value.lower() == str(value).strip().lower():
                return status
        return cls.OTHER


class ListStatus(Enum):
    """읽기 목록 분류"""
    READING = "Reading"
    PLAN_TO_READ = "Plan to read"
    ON_HOLD = "On hold"
    COMPLETED = "Completed"
    DROPPED = "Dropped"

    @classmethod
    def from_str(cls, value: str) -> 'ListStatus':
        for status in cls:
            if status.value.lower() == str(value).strip().lower():
                return status
        return cls.PLAN_TO_READ


@dataclass
class ContentAmount:
    """권/챕터/외전 수량 (챕터는 12.2처럼 파트를 포함할 수 있음)"""
    volumes: int = 0
    chapters: float = 0.0
    side_stories: int = 0

    _RE_VOL = re.compile(r'v(\d+)')
    _RE_CH = re.compile(r'c(\d+(?:\.\d+)?)')
    _RE_SS = re.compile(r'ss(\d+)')

    @classmethod
    def from_string(cls, value: str) -> 'ContentAmount':
        """
        압축 표기 문자열에서 변환

        Examples:
            >>> ContentAmount.from_string("v2c12.5ss1")
            ContentAmount(volumes=2, chapters=12.5, side_stories=1)
        """
        value_lower = (value or "").lower()
        # "ss"가 "c"로 오인되지 않도록 외전을 먼저 제거
        ss_match = cls._RE_SS.search(value_lower)
        rest = cls._RE_SS.sub('', value_lower)
        vol_match = cls._RE_VOL.search(rest)
        ch_match = cls._RE_CH.search(rest)

        return cls(
            volumes=int(vol_match.group(1)) if vol_match else 0,
            chapters=float(ch_match.group(1)) if ch_match else 0.0,
            side_stories=int(ss_match.group(1)) if ss_match else 0
        )

    def to_string(self, pretty: bool = False) -> str:
        parts = []
        if self.volumes > 0:
            parts.append(f"v{self.volumes}")
        if self.chapters > 0:
            parts.append(f"c{format_chapter(self.chapters)}")
        if self.side_stories > 0:
            parts.append(f"ss{self.side_stories}")
        return " ".join(parts) if pretty else "".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'volumes': self.volumes,
            'chapters': self.chapters,
            'side_stories': self.side_stories
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ContentAmount':
        return cls(
            volumes=int(data.get('volumes', 0)),
            chapters=float(data.get('chapters', 0.0)),
            side_stories=int(data.get('side_stories', 0))
        )


def format_chapter(chapter: float) -> str:
    """챕터 번호 문자열 (정수면 소수점 없이, 아니면 소수 첫째 자리까지)"""
    if float(chapter).is_integer():
        return f"{chapter:.0f}"
    return f"{chapter:.1f}"


@dataclass
class Novel:
    """라이브러리의 소설 한 편"""

    id: str
    title: str
    keywords: List[str] = field(default_factory=list)   # 창 제목 인식용 키워드
    content: ContentAmount = field(default_factory=ContentAmount)        # 공개된 분량
    content_read: ContentAmount = field(default_factory=ContentAmount)   # 읽은 분량
    status: NovelStatus = NovelStatus.ONGOING
    list_status: ListStatus = ListStatus.PLAN_TO_READ
    last_read: float = 0.0   # 인식 시스템이 마지막으로 진행도를 갱신한 시각

    @property
    def has_keywords(self) -> bool:
        return any(k for k in self.keywords)

    def chapters_read_str(self) -> str:
        return format_chapter(self.content_read.chapters)

    def to_dict(self) -> Dict[str, Any]:
        """JSON 직렬화를 위한 딕셔너리 변환"""
        return {
            'id': self.id,
            'title': self.title,
            'keywords': list(self.keywords),
            'content': self.content.to_dict(),
            'content_read': self.content_read.to_dict(),
            'status': self.status.value,
            'list_status': self.list_status.value,
            'last_read': self.last_read
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Novel':
        """딕셔너리에서 Novel 복원"""
        return cls(
            id=str(data['id']),
            title=data.get('title', ''),
            keywords=list(data.get('keywords') or []),
            content=ContentAmount.from_dict(data.get('content', {})),
            content_read=ContentAmount.from_dict(data.get('content_read', {})),
            status=NovelStatus.from_str(data.get('status', 'Ongoing')),
            list_status=ListStatus.from_str(data.get('list_status', 'Plan to read')),
            last_read=float(data.get('last_read', 0.0))
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2)


@dataclass(frozen=True)
class ChapterRead:
    """
    챕터 읽음 메시지 (사용자가 직접 수정한 경우 exact_num=True)

    같은 메시지가 연속으로 들어오면 두 번째는 무시됩니다.
    """
    novel: Novel
    volume: int = 0
    chapter: float = 0.0
    side: int = 0
    exact_num: bool = True

    def same_as(self, other: Optional['ChapterRead']) -> bool:
        if other is None:
            return False
        return (
            self.novel.id == other.novel.id
            and self.volume == other.volume
            and abs(self.chapter - other.chapter) < 1e-6
            and self.side == other.side
            and self.exact_num == other.exact_num
        )
