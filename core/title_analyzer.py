"""
창 제목 분석기

정리 → 토큰 분리 → 번호 추출 / 출처·제목 추정 → 소설 매칭 → 제안 목록
까지를 한 번에 수행해 TitleObservation을 만듭니다.
작업 스레드에서 실행되며 공유 상태(CurrentlyReading)는 건드리지 않습니다.
"""
import logging
from dataclasses import replace
from typing import Optional

from config.recognition_config import RecognitionSettings
from core.novel_matcher import NovelMatcher
from core.numeric_extractor import NumericExtractor
from core.recognition_state import TitleObservation
from core.sites import detect_site
from core.title_guesser import UNKNOWN, guess_source, guess_novel_name
from core.title_parser import sanitize_title, tokenize_title


class TitleAnalyzer:
    """창 제목 하나를 TitleObservation으로 변환"""

    def __init__(self, matcher: NovelMatcher, extractor: Optional[NumericExtractor] = None,
                 logger: Optional[logging.Logger] = None):
        self.matcher = matcher
        self.logger = logger or logging.getLogger(__name__)
        self.extractor = extractor or NumericExtractor(self.logger)

    def analyze(self, raw_title: Optional[str], settings: RecognitionSettings) -> TitleObservation:
        """
        창 제목 분석

        Args:
            raw_title: 선택된 창 제목 (없으면 None)
            settings: 틱 시작 시점의 설정 스냅샷

        Returns:
            TitleObservation (제목 형태를 인식하지 못하면 title=None)
        """
        sanitized = sanitize_title(raw_title)
        tokens = tokenize_title(sanitized)
        if tokens is None:
            if sanitized is not None:
                self.logger.debug(f"[TitleAnalyzer] 구분자 없음, 건너뜀: {sanitized!r}")
            return TitleObservation.nothing(settings)

        self.logger.debug(f"[TitleAnalyzer] tokens => {tokens}")

        site = detect_site(tokens)
        source = guess_source(tokens)
        data = replace(self.extractor.extract(tokens, site), source=source)

        # 토큰 하나하나를 먼저 완전 일치로 검사, 실패하면 제목을 추정해서 세 단계 매칭
        result = self.matcher.find_novel_from_tokens(tokens)
        if result.found:
            novel_name = result.matched_text
        else:
            novel_name = guess_novel_name(tokens, site)
            if novel_name != UNKNOWN:
                result = self.matcher.match(novel_name, settings.fuzzy_threshold)

        suggestion_keyword = ""
        suggestions = ()
        if not result.found:
            words = novel_name.split()
            suggestion_keyword = words[0] if words else ""
            suggestions = tuple(self.matcher.find_potential_novels(novel_name))
        else:
            self.logger.debug(
                f"[TitleAnalyzer] {result.novel.title} ({result.tier.value}, {result.similarity:.2f})"
            )

        return TitleObservation(
            title=sanitized,
            data=data,
            novel=result.novel,
            novel_name=novel_name,
            source=source,
            suggestion_keyword=suggestion_keyword,
            suggestions=suggestions,
            match_tier=result.tier.value,
            settings=settings
        )
