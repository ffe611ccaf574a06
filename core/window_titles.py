"""
운영체제 창 제목 조회

- WmctrlWindowTitleSource: X11 환경에서 `wmctrl -l` 출력으로 창 제목 목록 조회
- StaticWindowTitleSource: 고정된 제목 목록 (CLI --title, 테스트용)
"""
import subprocess
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Sequence

from core.errors import WindowTitleSourceError

WMCTRL_TIMEOUT = 5  # 초


class WindowTitleSource(ABC):
    """창 제목 목록 제공자"""

    @abstractmethod
    def list_open_window_titles(self) -> List[str]:
        """
        열려 있는 모든 창 제목

        Raises:
            WindowTitleSourceError: 조회 실패
        """


class WmctrlWindowTitleSource(WindowTitleSource):
    """wmctrl 명령으로 창 제목 조회"""

    def __init__(self, command: Optional[Sequence[str]] = None, timeout: float = WMCTRL_TIMEOUT):
        self.command = list(command or ["wmctrl", "-l"])
        self.timeout = timeout

    def list_open_window_titles(self) -> List[str]:
        try:
            completed = subprocess.run(
                self.command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=True
            )
        except FileNotFoundError as e:
            raise WindowTitleSourceError(f"{self.command[0]} not found") from e
        except subprocess.TimeoutExpired as e:
            raise WindowTitleSourceError(f"{self.command[0]} timed out") from e
        except subprocess.CalledProcessError as e:
            raise WindowTitleSourceError(
                f"{self.command[0]} failed ({e.returncode}): {(e.stderr or '').strip()}"
            ) from e

        return self.parse_output(completed.stdout)

    @staticmethod
    def parse_output(output: str) -> List[str]:
        """
        wmctrl -l 출력 파싱

        한 줄 형식: "<창 id> <데스크톱> <호스트> <제목>"
        """
        titles = []
        for line in output.splitlines():
            parts = line.split(None, 3)
            if len(parts) == 4 and parts[3].strip():
                titles.append(parts[3].strip())
        return titles


class StaticWindowTitleSource(WindowTitleSource):
    """고정된 창 제목 목록"""

    def __init__(self, titles: Iterable[str] = ()):
        self.titles = list(titles)

    def list_open_window_titles(self) -> List[str]:
        return list(self.titles)
