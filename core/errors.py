"""
인식 엔진 예외 정의

- WindowTitleSourceError: 운영체제 창 제목 조회 실패 (해당 틱만 건너뜀)
- TitleParseError: 토큰 하나의 숫자 파싱 실패 (로그 후 다음 토큰으로 진행)
- NovelNotFoundError: 라이브러리에 해당 id의 소설이 없음
"""


class RecognitionError(Exception):
    """인식 엔진 예외의 기본 클래스"""


class WindowTitleSourceError(RecognitionError):
    """창 제목 목록을 가져오지 못함"""


class TitleParseError(RecognitionError):
    """창 제목 토큰에서 숫자를 추출하지 못함"""

    def __init__(self, token: str, reason: str):
        self.token = token
        self.reason = reason
        super().__init__(f"'{token}': {reason}")


class NovelNotFoundError(RecognitionError):
    """라이브러리에서 소설을 찾을 수 없음"""

    def __init__(self, novel_id: str):
        self.novel_id = novel_id
        super().__init__(f"Novel not found: {novel_id}")
