"""
창 제목 조회 / 화면 표시 테스트
"""
import subprocess
import unittest
from unittest.mock import patch, Mock

import pytest

from core.display import LoggingDisplaySink
from core.errors import WindowTitleSourceError
from core.novel import Novel
from core.numeric_extractor import RecognitionData
from core.window_titles import WmctrlWindowTitleSource, StaticWindowTitleSource

WMCTRL_OUTPUT = (
    "0x01e00003  0 host Novel - Chapter 3 - Royal Road - Mozilla Firefox\n"
    "0x02400006 -1 host \n"
    "0x03000001  0 host Terminal\n"
)


class TestWmctrlWindowTitleSource:

    def test_parse_output(self):
        titles = WmctrlWindowTitleSource.parse_output(WMCTRL_OUTPUT)
        assert titles == ["Novel - Chapter 3 - Royal Road - Mozilla Firefox", "Terminal"]

    def test_success(self):
        completed = Mock(stdout=WMCTRL_OUTPUT)
        with patch("core.window_titles.subprocess.run", return_value=completed) as run:
            titles = WmctrlWindowTitleSource().list_open_window_titles()
        assert len(titles) == 2
        assert run.call_args[0][0] == ["wmctrl", "-l"]

    @pytest.mark.parametrize("error", [
        FileNotFoundError("wmctrl"),
        subprocess.TimeoutExpired(["wmctrl", "-l"], 5),
        subprocess.CalledProcessError(1, ["wmctrl", "-l"], stderr="Cannot open display."),
    ])
    def test_failures_wrapped(self, error):
        with patch("core.window_titles.subprocess.run", side_effect=error):
            with pytest.raises(WindowTitleSourceError):
                WmctrlWindowTitleSource().list_open_window_titles()


def test_static_source_returns_copy():
    source = StaticWindowTitleSource(["A - B"])
    titles = source.list_open_window_titles()
    titles.append("C")
    assert source.list_open_window_titles() == ["A - B"]


class TestLoggingDisplaySink(unittest.TestCase):

    def setUp(self):
        import logging
        self.logger = logging.getLogger("tests.display")
        self.sink = LoggingDisplaySink(self.logger)

    def test_reading_now_with_novel(self):
        novel = Novel(id="1", title="Mother of Learning")
        data = RecognitionData(chapter=12.0, reading=True, source="Royal Road")
        with self.assertLogs(self.logger, level="INFO") as captured:
            self.sink.publish_reading_now(data, novel, "?", "Royal Road")
        self.assertIn("Mother of Learning", captured.output[0])
        self.assertIn("c12", captured.output[0])

    def test_not_reading_and_suggestions(self):
        with self.assertLogs(self.logger, level="INFO") as captured:
            self.sink.publish_not_reading()
            self.sink.publish_suggestions("Mother", [Novel(id="1", title="Mother of Learning")])
        self.assertIn("Not reading", captured.output[0])
        self.assertIn("Mother of Learning", captured.output[1])
