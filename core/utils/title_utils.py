"""
창 제목 키워드 유틸리티

- 인식/무시 키워드 매칭 (대소문자 무시, <num>/<any> 자리표시자 지원)
- 소설 제목에서 약어 키워드 추정
"""
import re
from functools import lru_cache
from typing import Iterable, Optional, Pattern

NUM_PLACEHOLDER = "<num>"
ANY_PLACEHOLDER = "<any>"

# 이 길이 이하의 제목은 약어 대신 제목 그대로 키워드로 사용
ACRONYM_MIN_LENGTH = 7


@lru_cache(maxsize=256)
def compile_keyword(keyword: str) -> Pattern:
    """
    키워드를 정규식으로 변환

    - <num> → 숫자 1개 이상
    - <any> → 임의의 문자 1개
    - 나머지 문자는 그대로 비교

    Examples:
        >>> bool(compile_keyword("Chapter <num>").search("chapter 12"))
        True
    """
    parts = re.split(r'(<num>|<any>)', keyword, flags=re.IGNORECASE)
    regex = []
    for part in parts:
        lowered = part.lower()
        if lowered == NUM_PLACEHOLDER:
            regex.append(r'\d+')
        elif lowered == ANY_PLACEHOLDER:
            regex.append('.')
        else:
            regex.append(re.escape(part))
    return re.compile(''.join(regex), re.IGNORECASE)


def matches_keyword(title: str, keyword: str) -> bool:
    """제목에 키워드가 포함되어 있는지 확인 (대소문자 무시)"""
    if not keyword:
        return False
    if NUM_PLACEHOLDER in keyword.lower() or ANY_PLACEHOLDER in keyword.lower():
        return compile_keyword(keyword).search(title) is not None
    return keyword.lower() in title.lower()


def find_matching_keyword(title: str, keywords: Iterable[str]) -> Optional[str]:
    """제목에 포함된 첫 번째 키워드 반환"""
    for keyword in keywords:
        if matches_keyword(title, keyword):
            return keyword
    return None


def guess_keyword(title: str) -> str:
    """
    소설 제목에서 인식 키워드 추정

    긴 제목은 대문자 약어로, 짧은 제목은 그대로 사용합니다.

    Examples:
        >>> guess_keyword("Overgeared Legendary Blacksmith")
        'OLB'
        >>> guess_keyword("Solo")
        'Solo'
    """
    if len(title) > ACRONYM_MIN_LENGTH:
        return ''.join(c for c in title if c.isascii() and c.isupper())
    return title
