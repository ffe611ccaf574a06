"""
사이트명 / 소설 제목 추정

토큰 위치 규칙으로 어느 토큰이 사이트명이고 어느 토큰이 소설 제목인지 추정합니다.
모든 인덱스 계산은 범위를 보정하므로 짧은 토큰 목록에서도 예외가 발생하지 않습니다.
"""
import re
from typing import Optional, Sequence

from core.sites import (
    KnownSite,
    BROWSER_SOURCE_OFFSETS,
    detect_site,
    profile_for,
    clamp_index,
)

UNKNOWN = "?"

# 사이트 규칙이 없을 때 챕터를 읽는 중으로 판단하는 패턴 ("Chapter", "Ch 12", "ch.12")
_GENERIC_CHAPTER_PATTERN = re.compile(r'chapter|\bch[.:]?\s?\d', re.IGNORECASE)


def is_reading_chapter(tokens: Sequence[str], site: Optional[KnownSite] = None) -> bool:
    """
    토큰 목록이 '챕터를 읽는 중'인 제목 형태인지 판단

    - 최소 토큰 수 규칙이 있는 사이트면 토큰 수로만 판단
    - 그 외에는 "chapter" / "ch 12" 형태의 토큰이 있으면 True
    """
    if site is None:
        site = detect_site(tokens)

    min_tokens = profile_for(site).min_reading_tokens
    if min_tokens is not None:
        return len(tokens) >= min_tokens

    return any(_GENERIC_CHAPTER_PATTERN.search(token) for token in tokens)


def guess_source(tokens: Sequence[str]) -> str:
    """
    사이트명(출처) 토큰 추정

    브라우저 이름이 포함된 토큰이 있으면 끝에서부터 브라우저별 거리만큼 떨어진 토큰을 사용합니다.
    e.g. [Foo, Bar, 12, Source, Browser] → "Source"

    Returns:
        사이트명, 없으면 마지막 토큰, 토큰이 없으면 "?"
    """
    if not tokens:
        return UNKNOWN

    lowered = [t.lower() for t in tokens]
    for browser, offset in BROWSER_SOURCE_OFFSETS:
        if any(browser in token for token in lowered):
            index = clamp_index(len(tokens) - 1 - offset, len(tokens))
            return tokens[index]

    return tokens[-1]


def guess_novel_name(tokens: Sequence[str], site: Optional[KnownSite] = None) -> str:
    """
    소설 제목 토큰 추정

    챕터를 읽는 중이면 소설 제목이 첫 토큰이 아닐 수 있으므로 사이트별 위치를 사용하고,
    그 외에는 첫 번째 토큰을 사용합니다.
    """
    if not tokens:
        return UNKNOWN

    if site is None:
        site = detect_site(tokens)

    if is_reading_chapter(tokens, site):
        position = profile_for(site).novel_name_index
        if position is not None:
            return tokens[clamp_index(position, len(tokens))]

    return tokens[0]


def find_chapter_title(tokens: Sequence[str], site: Optional[KnownSite] = None) -> Optional[str]:
    """사이트별 위치의 챕터 제목 토큰 (규칙이 없는 사이트는 None)"""
    if not tokens:
        return None

    if site is None:
        site = detect_site(tokens)

    position = profile_for(site).chapter_title_index
    if position is None:
        return None
    return tokens[clamp_index(position, len(tokens))]
