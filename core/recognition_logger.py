"""
RecognitionLogger 로깅 모듈

소설 인식 틱, 매칭, 대기, 진행도 기록 이벤트를 기록합니다.
콘솔과 파일 출력을 동시에 지원하며, 로그 파일 로테이션을 제공합니다.
"""
import logging
import sys
from pathlib import Path
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Optional


# 로그 파일 기본 설정
DEFAULT_LOG_DIR = Path("logs")
DEFAULT_LOG_FILENAME = "recognition.log"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_BACKUP_COUNT = 5


class RecognitionLogger:
    """소설 인식 전용 로거 클래스"""

    def __init__(
        self,
        log_level: str = "INFO",
        log_dir: Optional[Path] = None,
        log_filename: str = DEFAULT_LOG_FILENAME,
        max_bytes: int = DEFAULT_MAX_BYTES,
        backup_count: int = DEFAULT_BACKUP_COUNT,
        console_output: bool = True,
        file_output: bool = True
    ):
        """
        RecognitionLogger 초기화

        Args:
            log_level: 로그 레벨 (DEBUG, INFO, WARNING, ERROR)
            log_dir: 로그 파일 저장 디렉토리
            log_filename: 요약 로그 파일명 (INFO 이상)
            max_bytes: 로그 파일 최대 크기 (기본 10MB)
            backup_count: 백업 파일 개수
            console_output: 콘솔 출력 여부
            file_output: 파일 출력 여부 (테스트에서는 False)
        """
        self.log_level = self._validate_log_level(log_level)
        self.log_dir = Path(log_dir or DEFAULT_LOG_DIR)

        self.summary_log_filename = log_filename
        # 상세 로그 (recognition_YYYYMMDD.log, DEBUG 포함)
        stem = Path(log_filename).stem
        self.detail_log_filename = f"{stem}_{datetime.now().strftime('%Y%m%d')}.log"

        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self.console_output = console_output
        self.file_output = file_output

        self._logger = self._setup_logger()

    def _validate_log_level(self, level: str) -> str:
        """로그 레벨 유효성 검증"""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR"}
        level_upper = str(level).upper()
        return level_upper if level_upper in valid_levels else "INFO"

    def _get_log_level_int(self) -> int:
        """문자열 로그 레벨을 logging 모듈 상수로 변환"""
        level_map = {
            "DEBUG": logging.DEBUG,
            "INFO": logging.INFO,
            "WARNING": logging.WARNING,
            "ERROR": logging.ERROR
        }
        return level_map.get(self.log_level, logging.INFO)

    def _setup_logger(self) -> logging.Logger:
        """로거 설정 및 핸들러 추가"""
        # 고유한 로거 이름 생성 (테스트 시 충돌 방지)
        logger = logging.getLogger(f"recognition_{id(self)}")
        # 각 핸들러가 자신의 레벨로 필터링
        logger.setLevel(logging.DEBUG)
        logger.propagate = False

        formatter = logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

        if self.file_output:
            self._add_file_handler(logger, formatter, self.summary_log_filename, logging.INFO)
            self._add_file_handler(logger, formatter, self.detail_log_filename, logging.DEBUG)

        if self.console_output:
            self._setup_console_handler(logger, formatter)

        return logger

    def _add_file_handler(self, logger: logging.Logger, formatter: logging.Formatter, filename: str, level: int):
        """파일 핸들러 추가 (공통 메서드)"""
        self.log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            filename=self.log_dir / filename,
            maxBytes=self.max_bytes,
            backupCount=self.backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    def _setup_console_handler(self, logger: logging.Logger, formatter: logging.Formatter):
        """콘솔 핸들러 설정"""
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self._get_log_level_int())
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    @property
    def logger(self) -> logging.Logger:
        """내부 logging.Logger (assertLogs 등에서 사용)"""
        return self._logger

    @property
    def log_file_path(self) -> Path:
        """현재 상세 로그 파일 경로 반환"""
        return self.log_dir / self.detail_log_filename

    def debug(self, message: str):
        self._logger.debug(message)

    def info(self, message: str):
        self._logger.info(message)

    def warning(self, message: str):
        self._logger.warning(message)

    def error(self, message: str, exc_info: bool = True):
        """
        ERROR 레벨 로그

        Args:
            message: 에러 메시지
            exc_info: 예외 발생 시 스택 트레이스 포함 여부 (기본 True)
        """
        has_exception = exc_info and sys.exc_info()[0] is not None
        self._logger.error(message, exc_info=True if has_exception else None)

    def exception(self, message: str):
        """예외 발생 시 스택 트레이스와 함께 ERROR 로그"""
        self._logger.exception(message)

    # ---------- 인식 이벤트 ----------

    def log_tick(self, title: Optional[str]):
        self.debug(f"[TICK] window title => {title!r}")

    def log_match(self, title: str, novel_title: str, tier: str):
        self.info(f"[MATCH] {title} → {novel_title} ({tier})")

    def log_near_miss(self, candidate: str, best: str, similarity: float):
        self.debug(f"[NEAR-MISS] {candidate} (did you mean {best}? [{similarity * 100:.0f}% match])")

    def log_wait(self, seconds_left: float):
        self.debug(f"[WAIT] Seconds left till list update: {seconds_left:.0f}")

    def log_commit(self, novel_title: str, volume: int, chapter: float, side_stories: int):
        self.info(f"[COMMIT] {novel_title}: v{volume} c{chapter:g} ss{side_stories}")

    def log_scheduler_start(self, interval: float):
        self.info(f"{'=' * 60}")
        self.info(f"Novel recognition started (interval: {interval}s)")
        self.info(f"{'=' * 60}")

    def log_scheduler_stop(self, interval: float):
        self.info(f"Novel recognition stopped (interval: {interval}s)")

    def close(self):
        """로거 핸들러 정리"""
        for handler in self._logger.handlers[:]:
            handler.close()
            self._logger.removeHandler(handler)


def get_logger(
    log_level: str = "INFO",
    log_dir: Optional[Path] = None,
    console_output: bool = True,
    file_output: bool = True
) -> RecognitionLogger:
    """RecognitionLogger 인스턴스 생성 헬퍼 함수"""
    return RecognitionLogger(
        log_level=log_level,
        log_dir=log_dir,
        console_output=console_output,
        file_output=file_output
    )
