"""
N-gram 유사도 코퍼스

라이브러리의 소설 제목들로 bigram 코퍼스를 만들고, 창 제목에서 추정한 제목과 가장 비슷한 항목을 찾습니다.
양 끝에 (arity - 1)개의 패딩 문자를 붙여 짧은 제목도 시작/끝 문자가 gram에 포함되도록 합니다.

유사도 공식 (warp = 2.0):
    all  = len(grams_a) + len(grams_b) - same
    diff = all - same
    similarity = (all^warp - diff^warp) / all^warp
"""
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List

DEFAULT_ARITY = 2
DEFAULT_WARP = 2.0
PAD_CHAR = '\u0000'


@dataclass(frozen=True)
class SearchResult:
    """코퍼스 검색 결과"""
    text: str
    similarity: float


def split_ngrams(text: str, arity: int = DEFAULT_ARITY) -> Counter:
    """패딩을 붙인 문자열을 n-gram 다중집합으로 분리"""
    padding = PAD_CHAR * (arity - 1)
    padded = f"{padding}{text}{padding}"
    if len(padded) < arity:
        return Counter()
    return Counter(padded[i:i + arity] for i in range(len(padded) - arity + 1))


def ngram_similarity(same: int, total: int, warp: float = DEFAULT_WARP) -> float:
    """공유 gram 수와 전체 gram 수로 유사도 계산 (0.0 ~ 1.0)"""
    if total <= 0:
        return 0.0
    if warp == 1.0:
        return same / total
    diff = total - same
    return (total ** warp - diff ** warp) / total ** warp


class NGramCorpus:
    """n-gram 유사도 검색 코퍼스"""

    def __init__(self, arity: int = DEFAULT_ARITY, warp: float = DEFAULT_WARP):
        if arity < 1:
            raise ValueError("arity must be >= 1")
        self.arity = arity
        self.warp = warp
        self._texts: Dict[str, Counter] = {}

    def add_text(self, text: str):
        """코퍼스에 문자열 추가 (중복은 무시)"""
        if text not in self._texts:
            self._texts[text] = split_ngrams(text, self.arity)

    def extend(self, texts: Iterable[str]):
        for text in texts:
            self.add_text(text)

    def __len__(self) -> int:
        return len(self._texts)

    def __contains__(self, text: str) -> bool:
        return text in self._texts

    def search(self, query: str, threshold: float = 0.25) -> List[SearchResult]:
        """
        유사도가 threshold 이상인 항목을 유사도 내림차순으로 반환

        Args:
            query: 검색 문자열
            threshold: 최소 유사도

        Returns:
            SearchResult 리스트 (동률이면 추가된 순서 유지)
        """
        query_grams = split_ngrams(query, self.arity)
        query_total = sum(query_grams.values())

        results = []
        for text, grams in self._texts.items():
            same = sum((query_grams & grams).values())
            total = query_total + sum(grams.values()) - same
            similarity = ngram_similarity(same, total, self.warp)
            if similarity >= threshold:
                results.append(SearchResult(text=text, similarity=similarity))

        results.sort(key=lambda r: r.similarity, reverse=True)
        return results
