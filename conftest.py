"""
Pytest Configuration

프로젝트 루트를 sys.path에 추가하여 절대 import를 지원하고,
테스트 공용 fixture(로거, 설정, 소설 목록)를 제공합니다.
"""
import sys
import os

import pytest

# 프로젝트 루트를 sys.path에 추가
_project_root = os.path.dirname(os.path.abspath(__file__))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from config.recognition_config import RecognitionSettings
from core.novel import Novel, ContentAmount, ListStatus, NovelStatus
from core.recognition_logger import RecognitionLogger


@pytest.fixture
def quiet_logger():
    """파일/콘솔 출력 없는 로거"""
    logger = RecognitionLogger(log_level="DEBUG", console_output=False, file_output=False)
    yield logger
    logger.close()


@pytest.fixture
def settings():
    """기본 인식 설정"""
    return RecognitionSettings()


@pytest.fixture
def sample_novels():
    """테스트용 소설 목록"""
    return [
        Novel(
            id="twi",
            title="The Wandering Inn",
            content=ContentAmount(volumes=9, chapters=1200.0),
        ),
        Novel(
            id="mol",
            title="Mother of Learning",
            keywords=["MoL"],
            content=ContentAmount(chapters=108.0),
            status=NovelStatus.COMPLETED,
        ),
        Novel(
            id="solo",
            title="Solo",
            keywords=["The Wandering Inn"],
            list_status=ListStatus.READING,
        ),
    ]
