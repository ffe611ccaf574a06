"""
창 제목 정리 및 토큰 분리

원본 창 제목 문자열을 정리(sanitize)한 뒤 " -" 구분자로 나누어 토큰 목록을 만듭니다.
토큰 순서는 제목 표시줄에 나타난 순서 그대로이며, 이후 위치 기반 추정에 사용됩니다.

예시:
    "My Cool Novel – Chapter 12 | Royal Road - Mozilla Firefox"
    → "My Cool Novel - Chapter 12 - Royal Road - Mozilla Firefox"
    → ["My Cool Novel", "Chapter 12", "Royal Road", "Mozilla Firefox"]
"""
from typing import List, Optional

# 토큰 구분자 (공백 + 하이픈)
SPLIT_PATTERN = " -"

# 하이픈으로 통일할 문자들
DASH_CHARACTERS = (
    '–',  # en dash
    '—',  # em dash
    '‒',  # figure dash
    '―',  # horizontal bar
    '|',
    '｜',  # fullwidth vertical line
)
_DASH_TRANSLATION = str.maketrans({c: '-' for c in DASH_CHARACTERS})

EPUB_SUFFIX = ".epub"


def sanitize_title(raw: Optional[str]) -> Optional[str]:
    """
    창 제목 정리

    - 대시/파이프 계열 문자를 하이픈으로 통일
    - ".epub" 제거 (제거 후 다시 생기는 경우까지 반복)

    Args:
        raw: 원본 창 제목 (None이면 읽는 중이 아님)

    Returns:
        정리된 제목 또는 None
    """
    if raw is None:
        return None

    cleaned = raw.translate(_DASH_TRANSLATION)
    while EPUB_SUFFIX in cleaned:
        cleaned = cleaned.replace(EPUB_SUFFIX, "")
    return cleaned


def tokenize_title(title: Optional[str]) -> Optional[List[str]]:
    """
    정리된 제목을 토큰 목록으로 분리

    Returns:
        앞뒤 공백이 제거된 토큰 목록, 구분자가 없으면 None
    """
    if not title or SPLIT_PATTERN not in title:
        return None
    return [token.strip() for token in title.split(SPLIT_PATTERN)]
