"""
Novel Library

인식 엔진이 사용하는 소설 라이브러리와 읽기 기록입니다.
모든 조회는 복사본을 반환하므로 호출 측에서 수정해도 라이브러리에는 영향이 없습니다.
진행도/상태 변경은 반드시 commit_progress / mark_status / move_to_list를 통해서만 이루어집니다.
"""
import copy
import json
import time
import threading
from pathlib import Path
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Iterable

from core.errors import NovelNotFoundError
from core.novel import Novel, NovelStatus, ListStatus, ContentAmount


class NovelLibrary:
    """스레드 안전한 메모리 내 소설 라이브러리"""

    def __init__(self, novels: Optional[Iterable[Novel]] = None, history: Optional['ReadHistory'] = None):
        self._lock = threading.RLock()
        self._novels: Dict[str, Novel] = {}
        self.history = history if history is not None else ReadHistory()
        for novel in novels or []:
            self.add(novel)

    # ---------- 조회 ----------

    def novels(self) -> List[Novel]:
        """등록 순서대로 모든 소설 (복사본)"""
        with self._lock:
            return [copy.deepcopy(n) for n in self._novels.values()]

    def get_by_id(self, novel_id: str) -> Optional[Novel]:
        with self._lock:
            novel = self._novels.get(novel_id)
            return copy.deepcopy(novel) if novel else None

    def lookup_by_title(self, title: str) -> Optional[Novel]:
        """제목 완전 일치 (대소문자 무시)"""
        wanted = title.lower()
        with self._lock:
            for novel in self._novels.values():
                if novel.title.lower() == wanted:
                    return copy.deepcopy(novel)
        return None

    def lookup_by_keyword_exact(self, keyword: str) -> Optional[Novel]:
        """인식 키워드 완전 일치 (대소문자 무시, 빈 키워드 제외)"""
        wanted = keyword.lower()
        with self._lock:
            for novel in self._novels.values():
                if any(k and k.lower() == wanted for k in novel.keywords):
                    return copy.deepcopy(novel)
        return None

    def all_titles(self) -> List[Tuple[str, str]]:
        """퍼지 코퍼스 구성용 (id, title) 목록"""
        with self._lock:
            return [(n.id, n.title) for n in self._novels.values()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._novels)

    # ---------- 변경 ----------

    def add(self, novel: Novel) -> Novel:
        """소설 추가 (같은 id가 있으면 교체)"""
        with self._lock:
            self._novels[novel.id] = copy.deepcopy(novel)
            return copy.deepcopy(novel)

    def _require(self, novel_id: str) -> Novel:
        novel = self._novels.get(novel_id)
        if novel is None:
            raise NovelNotFoundError(novel_id)
        return novel

    def commit_progress(self, novel_id: str, volume: int, chapter: float, side_stories: int,
                        exact: bool, list_status: Optional[ListStatus] = None,
                        chapter_title: Optional[str] = None) -> Novel:
        """
        읽은 분량 기록 (읽기 기록에도 추가)

        Args:
            novel_id: 소설 id
            volume, chapter, side_stories: 새 진행도 (정책 적용이 끝난 값)
            exact: 사용자가 직접 수정한 값이면 True (last_read를 갱신하지 않음)
            list_status: 함께 변경할 목록 상태
            chapter_title: 창 제목에서 찾은 챕터 제목

        Returns:
            갱신된 Novel
        """
        with self._lock:
            novel = self._require(novel_id)
            novel.content_read = ContentAmount(volume, chapter, side_stories)
            if list_status is not None:
                novel.list_status = list_status
            if not exact:
                novel.last_read = time.time()
            self.history.record(novel, chapter_title)
            return copy.deepcopy(novel)

    def mark_status(self, novel_id: str, status: NovelStatus) -> Novel:
        """연재 상태 변경"""
        with self._lock:
            novel = self._require(novel_id)
            novel.status = status
            return copy.deepcopy(novel)

    def move_to_list(self, novel_id: str, list_status: ListStatus) -> Novel:
        """목록 이동"""
        with self._lock:
            novel = self._require(novel_id)
            novel.list_status = list_status
            return copy.deepcopy(novel)

    def add_recognition_keyword(self, novel_id: str, keyword: str) -> Novel:
        """인식 키워드 추가 (빈 문자열/중복은 무시)"""
        keyword = keyword.strip()
        with self._lock:
            novel = self._require(novel_id)
            if keyword and keyword not in novel.keywords:
                novel.keywords.append(keyword)
            return copy.deepcopy(novel)

    # ---------- 불러오기 ----------

    @classmethod
    def from_json_file(cls, file_path: Path) -> 'NovelLibrary':
        """
        소설 목록 JSON 파일에서 라이브러리 생성

        파일 형식: [{"id": ..., "title": ..., ...}, ...]
        파일이 없거나 잘못된 경우 빈 라이브러리
        """
        file_path = Path(file_path)
        if not file_path.exists():
            return cls()
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (IOError, json.JSONDecodeError):
            return cls()
        if not isinstance(data, list):
            return cls()
        return cls(Novel.from_dict(item) for item in data if isinstance(item, dict) and 'id' in item)


@dataclass(frozen=True)
class HistoryItem:
    """읽기 기록 한 건"""
    novel_id: str
    content_read: ContentAmount
    chapter_title: Optional[str]
    time: float


class ReadHistory:
    """읽기(진행도 갱신) 기록"""

    def __init__(self):
        self._lock = threading.Lock()
        self._items: List[HistoryItem] = []

    def record(self, novel: Novel, chapter_title: Optional[str] = None,
               when: Optional[float] = None) -> HistoryItem:
        item = HistoryItem(
            novel_id=novel.id,
            content_read=copy.deepcopy(novel.content_read),
            chapter_title=chapter_title,
            time=when if when is not None else time.time()
        )
        with self._lock:
            self._items.append(item)
        return item

    def find_chapter_title(self, chapter_title: str, novel_id: Optional[str] = None) -> Optional[HistoryItem]:
        """같은 챕터 제목의 기록 검색 (novel_id가 있으면 그 소설의 기록만)"""
        with self._lock:
            for item in self._items:
                if not item.chapter_title or item.chapter_title != chapter_title:
                    continue
                if novel_id is None or item.novel_id == novel_id:
                    return item
        return None

    def find_last_read(self) -> Optional[HistoryItem]:
        """가장 최근 기록"""
        with self._lock:
            if not self._items:
                return None
            return max(self._items, key=lambda i: i.time)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
