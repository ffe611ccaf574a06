#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Novel Recognition - CLI Entry Point

열려 있는 창 제목에서 읽고 있는 웹소설과 챕터를 인식해 읽기 진행도를 기록합니다.

사용법:
    python main.py --library <소설목록.json> [옵션]

예시:
    python main.py -l ./novels.json                          # 3초마다 창 제목 조회
    python main.py -l ./novels.json --once                   # 한 번만 조회
    python main.py -l ./novels.json --title "Foo - Chapter 3 - Royal Road - Mozilla Firefox"
"""
import sys
import os

# 프로젝트 루트를 sys.path에 추가 (절대 import 지원)
_project_root = os.path.dirname(os.path.abspath(__file__))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

import argparse
import signal
import threading
from pathlib import Path

from config.recognition_config import RecognitionSettings
from core.library import NovelLibrary
from core.recognition_logger import RecognitionLogger
from core.recognition_orchestrator import RecognitionOrchestrator
from core.version import __version__, get_full_version
from core.window_titles import StaticWindowTitleSource, WmctrlWindowTitleSource


def create_parser() -> argparse.ArgumentParser:
    """CLI 인자 파서 생성"""
    parser = argparse.ArgumentParser(
        prog='novel-recognition',
        description=f'Novel Recognition v{__version__} - 창 제목 기반 웹소설 읽기 진행도 기록',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
예시:
  %(prog)s -l ./novels.json                    # 계속 실행 (Ctrl+C로 종료)
  %(prog)s -l ./novels.json --once             # 한 번만 조회
  %(prog)s -l ./novels.json --title "..."      # 창 제목 직접 지정
  %(prog)s -l ./novels.json --log-level DEBUG  # 디버그 로그 출력
        """
    )

    parser.add_argument(
        '-l', '--library',
        type=str,
        required=True,
        help='소설 목록 JSON 파일 경로 (필수)'
    )

    parser.add_argument(
        '--settings',
        type=str,
        default=None,
        help='인식 설정 JSON 파일 경로 (기본값: 기본 설정)'
    )

    parser.add_argument(
        '--log-level',
        type=str,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default=None,
        help='로그 레벨 설정 (기본값: 설정 파일 값)'
    )

    parser.add_argument(
        '--once',
        action='store_true',
        help='창 제목을 한 번만 조회하고 종료'
    )

    parser.add_argument(
        '--title',
        type=str,
        action='append',
        default=None,
        help='wmctrl 대신 사용할 창 제목 (여러 번 지정 가능)'
    )

    parser.add_argument(
        '-v', '--version',
        action='version',
        version=get_full_version(),
        help='버전 정보 출력'
    )

    return parser


def load_settings(settings_path) -> RecognitionSettings:
    """설정 파일 로드 후 환경변수 적용"""
    settings = RecognitionSettings.load(Path(settings_path) if settings_path else None)
    return settings.apply_env_overrides()


def run(args) -> int:
    """인식 실행 (종료 코드 반환)"""
    library_path = Path(args.library)
    if not library_path.exists():
        print(f"\n❌ 오류: 소설 목록 파일이 존재하지 않습니다: {library_path}")
        return 1

    settings = load_settings(args.settings)
    if args.log_level:
        settings.log_level = args.log_level

    logger = RecognitionLogger(log_level=settings.log_level)
    library = NovelLibrary.from_json_file(library_path)
    logger.info(f"Library loaded: {len(library)} novels ({library_path})")

    if args.title:
        title_source = StaticWindowTitleSource(args.title)
    else:
        title_source = WmctrlWindowTitleSource()

    orchestrator = RecognitionOrchestrator(library, settings, title_source, logger=logger)

    try:
        if args.once:
            orchestrator.poll_once()
            return 0

        if not orchestrator.start():
            print("\n⚠️  설정에서 소설 인식이 꺼져 있습니다.")
            return 0

        stop_event = threading.Event()
        signal.signal(signal.SIGTERM, lambda *_: stop_event.set())
        try:
            orchestrator.run_forever(stop_event)
        except KeyboardInterrupt:
            print("\n\n⚠️  사용자에 의해 중단되었습니다.")
        finally:
            orchestrator.stop()
        return 0
    finally:
        logger.close()


def main():
    """메인 엔트리포인트"""
    parser = create_parser()
    args = parser.parse_args()

    try:
        sys.exit(run(args))
    except Exception as e:
        print(f"\n❌ 치명적 오류: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
