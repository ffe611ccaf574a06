"""
화면 표시 대상 (UI 연동 지점)

인식 결과를 받는 쪽의 인터페이스입니다. 기본 구현은 로그로만 남깁니다.
"""
import logging
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from core.novel import Novel
from core.numeric_extractor import RecognitionData
from core.title_guesser import UNKNOWN


class DisplaySink(ABC):
    """인식 결과 표시 인터페이스"""

    @abstractmethod
    def publish_reading_now(self, data: RecognitionData, novel: Optional[Novel],
                            novel_name: str, source: str):
        pass

    @abstractmethod
    def publish_not_reading(self):
        pass

    @abstractmethod
    def publish_suggestions(self, keyword: str, candidates: Sequence[Novel]):
        pass

    @abstractmethod
    def request_navigate_to_reading_view(self):
        pass


class LoggingDisplaySink(DisplaySink):
    """표시 요청을 로그로 출력"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def publish_reading_now(self, data: RecognitionData, novel: Optional[Novel],
                            novel_name: str, source: str):
        if novel is not None:
            title = novel.title
            read = novel.content_read.to_string(pretty=True) or "-"
        else:
            title = novel_name if novel_name != UNKNOWN else "(unknown)"
            read = "-"

        chapter = f"v{data.volume} c{data.chapter:g} ss{data.side_story}" if data.reading else "-"
        self.logger.info(f"[READING NOW] {title} | source: {source} | title: {chapter} | read: {read}")

    def publish_not_reading(self):
        self.logger.info("[READING NOW] Not reading")

    def publish_suggestions(self, keyword: str, candidates: Sequence[Novel]):
        names = ", ".join(n.title for n in candidates) or "(none)"
        self.logger.info(f"[SUGGESTIONS] keyword: {keyword!r} → {names}")

    def request_navigate_to_reading_view(self):
        self.logger.debug("[READING NOW] navigate to reading view")
