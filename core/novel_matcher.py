"""
Novel Matcher

창 제목에서 얻은 후보 문자열을 라이브러리의 소설과 연결합니다.

매칭 순서 (처음 일치하면 종료):
1. 제목 완전 일치 (대소문자 무시)
2. 인식 키워드 완전 일치 (부분 일치 아님)
3. bigram 퍼지 검색 (유사도가 임계값을 넘어야 함, 미달이면 로그만 남김)

확실한 매칭이 없으면 find_potential_novels로 후보 목록(제안)을 만듭니다.
"""
import logging
import threading
from enum import Enum
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence, Tuple

from core.novel import Novel
from core.utils.similarity import NGramCorpus
from core.utils.title_utils import guess_keyword

# 퍼지 매칭 임계값 (매우 엄격함, 오탐 방지용)
FUZZY_THRESHOLD = 0.97
# 코퍼스 검색 최소 유사도 (근접 후보 로그용)
FUZZY_SEARCH_FLOOR = 0.25


class MatchTier(Enum):
    """매칭 단계"""
    EXACT_TITLE = "exact_title"
    EXACT_KEYWORD = "exact_keyword"
    FUZZY = "fuzzy"
    SUGGESTIONS = "suggestions"
    NONE = "none"


@dataclass(frozen=True)
class MatchResult:
    """매칭 결과"""
    tier: MatchTier
    novel: Optional[Novel] = None
    similarity: float = 0.0
    suggestions: Tuple[Novel, ...] = field(default_factory=tuple)
    matched_text: Optional[str] = None   # 매칭된 후보 문자열 (토큰 검사에서 일치한 토큰)

    @property
    def found(self) -> bool:
        return self.novel is not None

    @classmethod
    def none(cls) -> 'MatchResult':
        return cls(tier=MatchTier.NONE)


class NovelMatcher:
    """후보 문자열 → Novel 매칭 클래스"""

    def __init__(self, library, threshold: float = FUZZY_THRESHOLD,
                 logger: Optional[logging.Logger] = None):
        """
        Args:
            library: lookup_by_title / lookup_by_keyword_exact / all_titles / get_by_id / novels를 제공하는 라이브러리
            threshold: 퍼지 매칭 임계값 (이 값을 초과해야 매칭)
            logger: 로거 (없으면 모듈 로거)
        """
        self.library = library
        self.threshold = threshold
        self.logger = logger or logging.getLogger(__name__)

        # 코퍼스 캐시 (라이브러리 제목 목록이 바뀌면 다시 생성)
        self._corpus_lock = threading.Lock()
        self._corpus_key: Optional[Tuple[Tuple[str, str], ...]] = None
        self._corpus: Optional[NGramCorpus] = None
        self._corpus_ids: Dict[str, str] = {}

    # ---------- 단계별 매칭 ----------

    def match_exact(self, candidate: str) -> MatchResult:
        """1~2단계: 제목 완전 일치 → 키워드 완전 일치"""
        if not candidate:
            return MatchResult.none()

        novel = self.library.lookup_by_title(candidate)
        if novel is not None:
            return MatchResult(tier=MatchTier.EXACT_TITLE, novel=novel, similarity=1.0)

        novel = self.library.lookup_by_keyword_exact(candidate)
        if novel is not None:
            return MatchResult(tier=MatchTier.EXACT_KEYWORD, novel=novel, similarity=1.0)

        return MatchResult.none()

    def match_fuzzy(self, candidate: str, threshold: Optional[float] = None) -> MatchResult:
        """3단계: bigram 퍼지 검색 (threshold가 없으면 self.threshold)"""
        if not candidate:
            return MatchResult.none()

        corpus, corpus_ids = self._get_corpus()
        results = corpus.search(candidate.lower(), FUZZY_SEARCH_FLOOR)
        if not results:
            return MatchResult.none()

        top = results[0]
        threshold = self.threshold if threshold is None else threshold
        if top.similarity > threshold:
            novel_id = corpus_ids.get(top.text)
            novel = self.library.get_by_id(novel_id) if novel_id else None
            if novel is not None:
                return MatchResult(tier=MatchTier.FUZZY, novel=novel, similarity=top.similarity)
        elif hasattr(self.logger, "log_near_miss"):
            self.logger.log_near_miss(candidate, top.text, top.similarity)
        else:
            self.logger.debug(
                f"{candidate} (did you mean {top.text}? [{top.similarity * 100:.0f}% match])"
            )

        return MatchResult(tier=MatchTier.NONE, similarity=top.similarity)

    def match(self, candidate: str, threshold: Optional[float] = None) -> MatchResult:
        """세 단계를 순서대로 시도"""
        result = self.match_exact(candidate)
        if result.found:
            return result
        return self.match_fuzzy(candidate, threshold)

    def find_by_window_title(self, candidate: str) -> Optional[Novel]:
        return self.match(candidate).novel

    def find_novel_from_tokens(self, tokens: Sequence[str]) -> MatchResult:
        """토큰 하나하나를 완전 일치 단계로 검사 (제목 추정 전에 사용)"""
        for token in tokens:
            result = self.match_exact(token)
            if result.found:
                return replace(result, matched_text=token)
        return MatchResult.none()

    # ---------- 제안 ----------

    def find_potential_novels(self, free_text: str) -> List[Novel]:
        """
        확실한 매칭이 없을 때 후보 소설 목록

        - 인식 키워드가 있는 소설: 키워드 중 하나가 free_text의 단어를 포함하면 후보 (대소문자 구분)
        - 키워드가 없는 소설: 제목 약어가 free_text의 첫 단어를 포함하면 후보
        - 같은 소설은 한 번만 포함
        """
        words = free_text.split()
        if not words:
            return []

        potentials: List[Novel] = []
        seen = set()
        for novel in self.library.novels():
            if novel.id in seen:
                continue
            if novel.has_keywords:
                hit = any(keyword and word in keyword for word in words for keyword in novel.keywords)
            else:
                hit = words[0] in guess_keyword(novel.title)
            if hit:
                potentials.append(novel)
                seen.add(novel.id)

        return potentials

    def suggest(self, free_text: str) -> MatchResult:
        return MatchResult(
            tier=MatchTier.SUGGESTIONS,
            suggestions=tuple(self.find_potential_novels(free_text))
        )

    # ---------- 내부 ----------

    def _get_corpus(self) -> Tuple[NGramCorpus, Dict[str, str]]:
        titles = tuple(self.library.all_titles())
        with self._corpus_lock:
            if self._corpus is None or titles != self._corpus_key:
                corpus = NGramCorpus(arity=2)
                ids: Dict[str, str] = {}
                for novel_id, title in titles:
                    text = title.lower()
                    corpus.add_text(text)
                    ids.setdefault(text, novel_id)
                self._corpus = corpus
                self._corpus_ids = ids
                self._corpus_key = titles
            return self._corpus, self._corpus_ids
