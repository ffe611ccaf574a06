"""
Novel Recognition 버전 정보

버전 관리 규칙: Semantic Versioning (https://semver.org/lang/ko/)
- MAJOR: 호환되지 않는 API 변경
- MINOR: 하위 호환성 있는 기능 추가
- PATCH: 하위 호환성 있는 버그 수정
"""

__version__ = "0.4.0"
__release_date__ = "2026-10-18"
__app_name__ = "Novel Recognition"


def get_version() -> str:
    """버전 문자열 반환"""
    return __version__


def get_version_info() -> tuple:
    """버전 튜플 반환 (major, minor, patch)"""
    return tuple(int(p) for p in __version__.split('.')[:3])


def get_full_version() -> str:
    """전체 버전 정보 문자열 반환"""
    return f"{__app_name__} v{__version__} ({__release_date__})"
