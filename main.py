"""
main.py — 평가 응시 앱 진입점

API 서버(uvicorn, 스레드)와 Streamlit 응시 화면(하위 프로세스)을 함께 띄우고
브라우저로 응시 화면 /?id=<평가 ID> 를 연다.

사용법:
    python main.py [--host 127.0.0.1] [--port 8000] [--ui-port 8501]
                   [--assessment <평가 ID>] [--no-browser]
"""

import argparse
import logging
import socket
import subprocess
import sys
import threading
import time
import webbrowser
from typing import List, Optional

from config import (
    DEFAULT_HOST, DEFAULT_PORT, LOG_FILE, STORE_API_KEY, STORE_URL,
    STREAMLIT_APP, UI_PORT,
)

logger = logging.getLogger(__name__)


# ── 로깅 설정 ────────────────────────────────────────────────────────────────

def _configure_logging() -> None:
    try:
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            handlers=[
                logging.FileHandler(LOG_FILE, encoding='utf-8'),
                logging.StreamHandler(sys.stdout)
            ]
        )
    except PermissionError:
        # 로그 파일 점유 시 콘솔 출력만 사용
        logging.basicConfig(level=logging.INFO)


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Assessment CBT 응시 앱")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="API 서버 포트")
    parser.add_argument("--ui-port", type=int, default=UI_PORT, help="Streamlit 응시 화면 포트")
    parser.add_argument("--assessment", help="브라우저로 바로 열 평가 ID")
    parser.add_argument("--no-browser", action="store_true", help="브라우저를 열지 않음")
    return parser.parse_args(argv)


# ── 서버 ─────────────────────────────────────────────────────────────────────

def _wait_for_server(host: str, port: int, timeout: float = 15.0) -> bool:
    deadline = time.time() + timeout
    while time.time() < deadline:
        try:
            with socket.create_connection((host, port), timeout=0.5):
                return True
        except OSError:
            time.sleep(0.1)
    return False


def _start_api(host: str, port: int) -> None:
    import uvicorn
    from api.app import create_app

    logger.info(f"Uvicorn 서버 시작 - {host}:{port}")
    uvicorn.run(create_app(), host=host, port=port, log_level="warning")


def _streamlit_command(host: str, port: int) -> List[str]:
    return [
        sys.executable, "-m", "streamlit", "run", STREAMLIT_APP,
        "--server.address", host,
        "--server.port", str(port),
        "--server.headless", "true",
    ]


def _page_url(host: str, port: int, assessment_id: Optional[str]) -> str:
    """Streamlit 응시 화면 주소. 평가 ID는 ?id= 로 전달한다."""
    url = f"http://{host}:{port}/"
    if assessment_id:
        url += f"?id={assessment_id}"
    return url


# ── 메인 실행 ────────────────────────────────────────────────────────────────

def main(argv: Optional[List[str]] = None) -> int:
    _configure_logging()
    args = _parse_args(argv)
    logger.info("=== Assessment CBT Started ===")

    if not STORE_URL or not STORE_API_KEY:
        logger.warning("STORE_URL / STORE_API_KEY 환경 변수가 비어 있습니다. 로그인과 평가 로드가 실패합니다.")

    api_thread = threading.Thread(target=_start_api, args=(args.host, args.port), daemon=True)
    api_thread.start()

    logger.info(f"Streamlit 응시 화면 시작 - {args.host}:{args.ui_port}")
    ui_process = subprocess.Popen(_streamlit_command(args.host, args.ui_port))

    try:
        if not (_wait_for_server(args.host, args.port) and _wait_for_server(args.host, args.ui_port, timeout=30.0)):
            logger.error("서버 시작 제한 시간을 초과했습니다. 포트 사용 여부를 확인해 주세요.")
            return 1

        url = _page_url(args.host, args.ui_port, args.assessment)
        logger.info(f"준비 완료: 응시 화면 {url} / API http://{args.host}:{args.port}/api")
        if not args.no_browser:
            webbrowser.open(url)

        # 메인 스레드 유지
        while api_thread.is_alive() and ui_process.poll() is None:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("사용자에 의해 종료되었습니다.")
    finally:
        if ui_process.poll() is None:
            ui_process.terminate()
            ui_process.wait(timeout=10)
    return 0


if __name__ == "__main__":
    sys.exit(main())
