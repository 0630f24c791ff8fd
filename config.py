import os

# 기본 디렉토리 설정
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# 경로 설정
STREAMLIT_APP = os.path.join(BASE_DIR, "streamlit_app.py")
LOG_FILE = os.path.join(BASE_DIR, "launch.log")

# 서버 설정
DEFAULT_HOST = os.getenv("HOST", "127.0.0.1")
DEFAULT_PORT = int(os.getenv("PORT", "8000"))
UI_PORT = int(os.getenv("UI_PORT", "8501"))   # Streamlit 응시 화면

# 원격 저장소 (PostgREST / Supabase 호환) 설정
STORE_URL = os.getenv("STORE_URL", "")
STORE_API_KEY = os.getenv("STORE_API_KEY", "")

# 시험 진행 설정
SECONDS_PER_QUESTION = 60       # 문제당 제한 시간 (초)
TIMER_WARNING_SECONDS = 180     # 이하이면 노란색 경고
TIMER_CRITICAL_SECONDS = 60     # 이하이면 빨간색 경고
DEFAULT_PASSING_SCORE = 60      # 합격 기준이 비어 있는 시험의 기본값 (%)
KEYBOARD_OPTION_KEYS = 4        # 숫자키 1~4 → 보기 0~3

# 로드 실패 시 이동할 안전한 페이지
SAFE_LANDING_URL = "/"
