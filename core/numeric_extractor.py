"""
권/챕터/외전 번호 추출기

창 제목 토큰 목록에서 권(volume), 챕터(chapter), 외전(side story) 번호와 챕터 제목을 추출합니다.

핵심 규칙:
- 항목별로 토큰을 앞에서부터 검사하고, 숫자를 얻은 첫 번째 토큰을 사용 (first-match-wins)
- 토큰마다 정규식 패턴을 순서대로 시도
- 챕터 번호는 소수 가능 ("12.2"), 끝의 마침표는 제거 ("12.2." → 12.2)
- 챕터가 소수로 파싱되면 파트 번호 추출은 건너뜀 (소수가 이미 파트를 의미)
- 숫자 파싱 실패는 로그만 남기고 다음 토큰으로 진행 (전체 파이프라인을 중단하지 않음)
- 챕터를 읽는 중인 제목 형태가 아니면 모든 숫자를 0으로 되돌림 (오탐 방지)
"""
import re
import logging
from dataclasses import dataclass
from typing import List, Optional, Pattern, Sequence

from core.errors import TitleParseError
from core.sites import KnownSite, detect_site
from core.title_guesser import is_reading_chapter, find_chapter_title

# 정수 범위 제한 (원본 데이터가 32비트 정수)
MAX_NUMBER = 2 ** 31 - 1

# 키워드와 숫자 사이에 허용하는 구분자
_SEP = r'[.:;\-_]?\s?'


def _keyword_patterns(keywords: Sequence[str], number: str) -> List[Pattern]:
    return [
        re.compile(r'\b' + keyword + _SEP + number, re.IGNORECASE)
        for keyword in keywords
    ]


# 긴 키워드부터 시도 ("volume" → "vol" → "v")
VOLUME_PATTERNS = _keyword_patterns(['volume', 'book', 'vol', 'v'], r'(\d+)')
CHAPTER_PATTERNS = _keyword_patterns(['chapter', 'ch', 'c'], r'(\d+(?:\.\d+)?\.?)')
PART_PATTERNS = _keyword_patterns(['part', 'pt'], r'(\d+)')
SIDE_STORY_PATTERNS = _keyword_patterns(
    [r'(?:extra|side|special)(?:\s?(?:story|stories|chapter|episode))?'], r'(\d+)'
)


@dataclass(frozen=True)
class RecognitionData:
    """창 제목 하나를 파싱한 결과"""
    volume: int = 0
    chapter: float = 0.0
    side_story: int = 0
    chapter_title: Optional[str] = None
    source: str = ""
    reading: bool = False


@dataclass(frozen=True)
class _NumberMatch:
    value: float
    fractional: bool


class NumericExtractor:
    """토큰 목록에서 권/챕터/외전 번호를 추출하는 클래스"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def extract(self, tokens: Sequence[str], site: Optional[KnownSite] = None) -> RecognitionData:
        """
        토큰 목록에서 번호 추출

        Args:
            tokens: 창 제목 토큰 목록
            site: 판별된 사이트 (None이면 여기서 판별)

        Returns:
            RecognitionData (source는 비어 있음, 호출 측에서 채움)
        """
        tokens = list(tokens)
        if site is None:
            site = detect_site(tokens)

        volume = self._first_number(tokens, VOLUME_PATTERNS, "volume")
        chapter = self._first_number(tokens, CHAPTER_PATTERNS, "chapter", allow_fraction=True)
        side_story = self._first_number(tokens, SIDE_STORY_PATTERNS, "side story")

        chapter_value = chapter.value if chapter else 0.0

        # 정수 챕터일 때만 파트 번호를 더함 ("Chapter 12 Part 2" → 12.2)
        if chapter is not None and not chapter.fractional:
            part = self._first_number(tokens, PART_PATTERNS, "part")
            if part is not None and 0 < part.value < 10:
                chapter_value += part.value / 10.0

        reading = is_reading_chapter(tokens, site)
        if not reading:
            # 읽는 중이 아니면 찾은 숫자는 신뢰할 수 없음
            return RecognitionData(reading=False)

        return RecognitionData(
            volume=int(volume.value) if volume else 0,
            chapter=chapter_value,
            side_story=int(side_story.value) if side_story else 0,
            chapter_title=find_chapter_title(tokens, site),
            reading=True
        )

    def _first_number(self, tokens: Sequence[str], patterns: Sequence[Pattern], label: str,
                      allow_fraction: bool = False) -> Optional[_NumberMatch]:
        """패턴 목록으로 토큰을 순서대로 검사해 처음 얻은 숫자 반환"""
        for token in tokens:
            for pattern in patterns:
                match = pattern.search(token)
                if not match:
                    continue
                try:
                    return self._parse_number(match.group(1), allow_fraction)
                except TitleParseError as e:
                    self.logger.debug(f"[NumericExtractor] {label} 파싱 실패, 건너뜀: {e}")
                    # 같은 토큰의 다음 패턴은 같은 숫자를 다시 잡으므로 다음 토큰으로
                    break
        return None

    def _parse_number(self, text: str, allow_fraction: bool) -> _NumberMatch:
        """숫자 문자열 파싱 (끝의 마침표 제거)"""
        cleaned = text.rstrip('.')
        if not cleaned:
            raise TitleParseError(text, "empty number")

        fractional = '.' in cleaned
        if fractional and not allow_fraction:
            raise TitleParseError(text, "fraction not allowed")

        try:
            value = float(cleaned) if fractional else int(cleaned)
        except ValueError:
            raise TitleParseError(text, "not a number")

        if value > MAX_NUMBER:
            raise TitleParseError(text, "number out of range")

        return _NumberMatch(value=float(value), fractional=fractional)
