"""
RecognitionSettings 설정 관리 모듈

창 제목 기반 소설 인식(Novel Recognition)에 필요한 모든 설정을 관리합니다.
JSON 파일에서 로드하고, 잘못된 값은 기본값으로 대체합니다.
환경변수(.env 포함)가 파일 설정보다 우선합니다.
"""
import os
import copy
import json
from enum import Enum
from pathlib import Path
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional

from dotenv import load_dotenv


# 기본 인식 키워드 (창 제목에 포함되어 있으면 인식 대상)
DEFAULT_TITLE_KEYWORDS: List[str] = ["Chapter", "Novel Updates", "Royal Road", "Scribble Hub"]

# 기본 무시 키워드 (창 제목에 포함되어 있으면 해당 틱 전체를 건너뜀)
DEFAULT_IGNORE_KEYWORDS: List[str] = ["Manga", "Manhua", "Manhwa"]

DEFAULT_DELAY = 120             # 진행도 기록 전 대기 시간 (초)
DEFAULT_POLL_INTERVAL = 3       # 창 제목 조회 주기 (초)
MIN_POLL_INTERVAL = 1
DEFAULT_FUZZY_THRESHOLD = 0.97  # 퍼지 매칭 허용 유사도
MIN_FUZZY_THRESHOLD = 0.9

# 유효한 로그 레벨
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR"}

# 환경변수 이름
ENV_ENABLE = "NOVEL_RECOGNITION_ENABLE"
ENV_DELAY = "NOVEL_RECOGNITION_DELAY"
ENV_INTERVAL = "NOVEL_RECOGNITION_INTERVAL"
ENV_LOG_LEVEL = "NOVEL_RECOGNITION_LOG_LEVEL"


class ChapterReadPreference(Enum):
    """화면에 보이는 챕터 번호를 '읽음'으로 볼지, 이전 챕터까지만 '읽음'으로 볼지"""
    PREVIOUS = "Previous"   # 이전 챕터 번호를 읽음으로 기록
    CURRENT = "Current"     # 현재 챕터 번호를 읽음으로 기록

    @classmethod
    def from_str(cls, value: str) -> 'ChapterReadPreference':
        """문자열에서 변환 (알 수 없는 값은 CURRENT)"""
        for pref in cls:
            if pref.value.lower() == str(value).strip().lower():
                return pref
        return cls.CURRENT

    @classmethod
    def from_int(cls, value: int) -> 'ChapterReadPreference':
        """정수에서 변환 (0 = PREVIOUS, 그 외 = CURRENT)"""
        return cls.PREVIOUS if value == 0 else cls.CURRENT

    def to_int(self) -> int:
        return 0 if self is ChapterReadPreference.PREVIOUS else 1

    @property
    def read_modifier(self) -> int:
        """챕터 번호에서 빼야 하는 값"""
        return 1 if self is ChapterReadPreference.PREVIOUS else 0


@dataclass
class RecognitionSettings:
    """소설 인식 설정 데이터클래스"""

    enable: bool = True
    delay: int = DEFAULT_DELAY
    chapter_read_preference: ChapterReadPreference = ChapterReadPreference.CURRENT
    when_novel_go_to_reading: bool = True
    when_not_novel_go_to_reading: bool = True
    autocomplete_ongoing: bool = False
    title_keywords: List[str] = field(default_factory=lambda: DEFAULT_TITLE_KEYWORDS.copy())
    ignore_keywords: List[str] = field(default_factory=lambda: DEFAULT_IGNORE_KEYWORDS.copy())
    poll_interval: int = DEFAULT_POLL_INTERVAL
    fuzzy_threshold: float = DEFAULT_FUZZY_THRESHOLD
    log_level: str = "INFO"

    def __post_init__(self):
        """초기화 후 유효성 검증 및 기본값 적용"""
        self._validate_and_fix()

    def _validate_and_fix(self):
        """잘못된 값을 기본값으로 대체"""
        if not isinstance(self.enable, bool):
            self.enable = True

        # delay 검증 (0 이상의 정수)
        if isinstance(self.delay, bool) or not isinstance(self.delay, int) or self.delay < 0:
            self.delay = DEFAULT_DELAY

        if isinstance(self.chapter_read_preference, str):
            self.chapter_read_preference = ChapterReadPreference.from_str(self.chapter_read_preference)
        elif isinstance(self.chapter_read_preference, int) and not isinstance(self.chapter_read_preference, bool):
            self.chapter_read_preference = ChapterReadPreference.from_int(self.chapter_read_preference)
        elif not isinstance(self.chapter_read_preference, ChapterReadPreference):
            self.chapter_read_preference = ChapterReadPreference.CURRENT

        for name in ('when_novel_go_to_reading', 'when_not_novel_go_to_reading'):
            if not isinstance(getattr(self, name), bool):
                setattr(self, name, True)

        if not isinstance(self.autocomplete_ongoing, bool):
            self.autocomplete_ongoing = False

        # 키워드 목록은 문자열 리스트여야 함 (빈 문자열 제거)
        if not isinstance(self.title_keywords, list):
            self.title_keywords = DEFAULT_TITLE_KEYWORDS.copy()
        else:
            self.title_keywords = [str(k) for k in self.title_keywords if str(k).strip()]

        if not isinstance(self.ignore_keywords, list):
            self.ignore_keywords = DEFAULT_IGNORE_KEYWORDS.copy()
        else:
            self.ignore_keywords = [str(k) for k in self.ignore_keywords if str(k).strip()]

        # poll_interval 검증 (최소 1초)
        if isinstance(self.poll_interval, bool) or not isinstance(self.poll_interval, (int, float)):
            self.poll_interval = DEFAULT_POLL_INTERVAL
        elif self.poll_interval < MIN_POLL_INTERVAL:
            self.poll_interval = MIN_POLL_INTERVAL

        # fuzzy_threshold 검증 (0.9 ~ 1.0)
        if isinstance(self.fuzzy_threshold, bool) or not isinstance(self.fuzzy_threshold, (int, float)):
            self.fuzzy_threshold = DEFAULT_FUZZY_THRESHOLD
        else:
            self.fuzzy_threshold = min(1.0, max(MIN_FUZZY_THRESHOLD, float(self.fuzzy_threshold)))

        if not isinstance(self.log_level, str) or self.log_level.upper() not in VALID_LOG_LEVELS:
            self.log_level = "INFO"
        else:
            self.log_level = self.log_level.upper()

    def to_dict(self) -> Dict[str, Any]:
        """JSON 직렬화를 위한 딕셔너리 변환"""
        return {
            'enable': self.enable,
            'delay': self.delay,
            'chapter_read_preference': self.chapter_read_preference.value,
            'when_novel_go_to_reading': self.when_novel_go_to_reading,
            'when_not_novel_go_to_reading': self.when_not_novel_go_to_reading,
            'autocomplete_ongoing': self.autocomplete_ongoing,
            'title_keywords': list(self.title_keywords),
            'ignore_keywords': list(self.ignore_keywords),
            'poll_interval': self.poll_interval,
            'fuzzy_threshold': self.fuzzy_threshold,
            'log_level': self.log_level
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RecognitionSettings':
        """딕셔너리에서 RecognitionSettings 복원 (안전한 기본값 적용)"""
        return cls(
            enable=data.get('enable', True),
            delay=data.get('delay', DEFAULT_DELAY),
            chapter_read_preference=data.get('chapter_read_preference', ChapterReadPreference.CURRENT),
            when_novel_go_to_reading=data.get('when_novel_go_to_reading', True),
            when_not_novel_go_to_reading=data.get('when_not_novel_go_to_reading', True),
            autocomplete_ongoing=data.get('autocomplete_ongoing', False),
            title_keywords=data.get('title_keywords', DEFAULT_TITLE_KEYWORDS.copy()),
            ignore_keywords=data.get('ignore_keywords', DEFAULT_IGNORE_KEYWORDS.copy()),
            poll_interval=data.get('poll_interval', DEFAULT_POLL_INTERVAL),
            fuzzy_threshold=data.get('fuzzy_threshold', DEFAULT_FUZZY_THRESHOLD),
            log_level=data.get('log_level', 'INFO')
        )

    def to_json(self, indent: int = 2) -> str:
        """JSON 문자열로 직렬화"""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)

    @classmethod
    def from_json(cls, json_str: str) -> 'RecognitionSettings':
        """JSON 문자열에서 RecognitionSettings 복원"""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError:
            # JSON 파싱 실패 시 기본 설정 반환
            return cls()
        if not isinstance(data, dict):
            return cls()
        return cls.from_dict(data)

    def save(self, file_path: Path) -> None:
        """설정을 JSON 파일로 저장"""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, 'w', encoding='utf-8') as f:
            f.write(self.to_json())

    @classmethod
    def load(cls, file_path: Optional[Path]) -> 'RecognitionSettings':
        """JSON 파일에서 설정 로드 (파일 없으면 기본값)"""
        if file_path is None:
            return cls()
        file_path = Path(file_path)
        if not file_path.exists():
            return cls()

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                return cls.from_json(f.read())
        except (IOError, json.JSONDecodeError):
            return cls()

    def apply_env_overrides(self, dotenv_path: Optional[Path] = None) -> 'RecognitionSettings':
        """
        환경변수 값으로 설정 덮어쓰기

        .env 파일을 먼저 로드한 뒤(시스템 변수보다 우선) 아래 변수를 확인합니다.
        - NOVEL_RECOGNITION_ENABLE: true/false
        - NOVEL_RECOGNITION_DELAY: 초 단위 정수
        - NOVEL_RECOGNITION_INTERVAL: 초 단위 정수
        - NOVEL_RECOGNITION_LOG_LEVEL: DEBUG/INFO/WARNING/ERROR

        Returns:
            self (체이닝용)
        """
        load_dotenv(dotenv_path=dotenv_path, override=True)

        enable = os.environ.get(ENV_ENABLE)
        if enable is not None:
            self.enable = enable.strip().lower() in ('1', 'true', 'yes', 'on')

        delay = os.environ.get(ENV_DELAY)
        if delay is not None and delay.strip().isdigit():
            self.delay = int(delay.strip())

        interval = os.environ.get(ENV_INTERVAL)
        if interval is not None and interval.strip().isdigit():
            self.poll_interval = int(interval.strip())

        log_level = os.environ.get(ENV_LOG_LEVEL)
        if log_level:
            self.log_level = log_level

        self._validate_and_fix()
        return self

    def snapshot(self) -> 'RecognitionSettings':
        """틱 단위로 사용할 독립 복사본 반환 (틱 도중 변경이 반영되지 않도록)"""
        return copy.deepcopy(self)
