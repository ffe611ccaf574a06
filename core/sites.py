"""
알려진 사이트/브라우저 규칙

창 제목의 토큰 위치 규칙은 사이트마다 다르기 때문에 사이트별 프로필로 관리합니다.
사이트는 틱마다 한 번만 판별(detect_site)하고, 이후 추출기/추정기에 그대로 전달합니다.

주의: 토큰 수 기준과 위치 값은 실제 사이트 제목을 관찰해서 정한 값입니다.
사이트 UI가 바뀌면 맞지 않을 수 있으므로 SITE_PROFILES만 수정하면 되도록 분리했습니다.
"""
from enum import Enum
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple


class KnownSite(Enum):
    """창 제목에서 판별 가능한 사이트"""
    ROYAL_ROAD = "Royal Road"
    SCRIBBLE_HUB = "Scribble Hub"
    WUXIAWORLD = "WuxiaWorld"
    BOX_NOVEL = "BoxNovel"
    BAD_READER = "Bad Reader"
    NOVEL_UPDATES = "Novel Updates"
    WEBNOVEL = "Webnovel"
    GENERIC = ""


@dataclass(frozen=True)
class SiteProfile:
    """
    사이트별 토큰 위치 규칙

    Attributes:
        aliases: 판별용 문자열 (소문자, 부분 일치)
        min_reading_tokens: 챕터를 읽는 중으로 보기 위한 최소 토큰 수 (None이면 일반 규칙)
        novel_name_index: 챕터를 읽는 중일 때 소설 제목 토큰 위치
        chapter_title_index: 챕터 제목 토큰 위치
    """
    aliases: Tuple[str, ...]
    min_reading_tokens: Optional[int] = None
    novel_name_index: Optional[int] = None
    chapter_title_index: Optional[int] = None


# 판별 순서 = 딕셔너리 순서
SITE_PROFILES: Dict[KnownSite, SiteProfile] = {
    KnownSite.ROYAL_ROAD: SiteProfile(
        aliases=("royal road", "royalroad"),
        min_reading_tokens=4,
        novel_name_index=1,
        chapter_title_index=0,
    ),
    KnownSite.SCRIBBLE_HUB: SiteProfile(
        aliases=("scribble hub", "scribblehub"),
        chapter_title_index=1,
    ),
    KnownSite.WUXIAWORLD: SiteProfile(aliases=("wuxiaworld",), min_reading_tokens=3),
    KnownSite.BOX_NOVEL: SiteProfile(aliases=("boxnovel",), min_reading_tokens=3),
    KnownSite.BAD_READER: SiteProfile(aliases=("bad reader",), novel_name_index=1),
    KnownSite.NOVEL_UPDATES: SiteProfile(aliases=("novel updates", "novelupdates")),
    KnownSite.WEBNOVEL: SiteProfile(aliases=("webnovel",)),
    KnownSite.GENERIC: SiteProfile(aliases=()),
}

# 브라우저가 제목 끝에 붙이는 토큰 수 (끝에서부터 사이트명까지의 거리)
BROWSER_SOURCE_OFFSETS: Tuple[Tuple[str, int], ...] = (
    ("firefox", 1),
    ("google", 1),
    ("opera", 1),
    ("microsoft", 2),
    ("brave", 1),
)


def detect_site(tokens: Sequence[str],
                profiles: Optional[Dict[KnownSite, SiteProfile]] = None) -> KnownSite:
    """
    토큰 목록에서 사이트 판별 (대소문자 무시, 부분 일치)

    Args:
        tokens: 창 제목 토큰 목록
        profiles: 사이트 프로필 (None이면 SITE_PROFILES)

    Returns:
        처음 일치한 사이트, 없으면 KnownSite.GENERIC
    """
    profiles = profiles if profiles is not None else SITE_PROFILES
    lowered = [t.lower() for t in tokens]
    for site, profile in profiles.items():
        if any(alias in token for alias in profile.aliases for token in lowered):
            return site
    return KnownSite.GENERIC


def profile_for(site: KnownSite,
                profiles: Optional[Dict[KnownSite, SiteProfile]] = None) -> SiteProfile:
    profiles = profiles if profiles is not None else SITE_PROFILES
    return profiles.get(site) or SITE_PROFILES[KnownSite.GENERIC]


def clamp_index(index: int, length: int) -> Optional[int]:
    """인덱스를 [0, length-1] 범위로 보정 (빈 목록이면 None)"""
    if length <= 0:
        return None
    return max(0, min(index, length - 1))
