"""
streamlit_app.py — 평가 응시 페이지 (Streamlit)

사용법: streamlit run streamlit_app.py  →  http://localhost:8501/?id=<평가 ID>

화면 전환은 컨트롤러의 단계(phase)만 보고 결정한다.
  intro → exam → (submitting) → result
"""

import logging

import streamlit as st

from config import SAFE_LANDING_URL, STORE_API_KEY, STORE_URL
from assessment_cbt.models.session_state import AttemptPhase
from assessment_cbt.services.clock import SystemClock
from assessment_cbt.services.errors import AssessmentLoadError
from assessment_cbt.services.repository import AssessmentRepository
from assessment_cbt.services.store import StoreClient
from assessment_cbt.services.test_controller import TestSessionController
from assessment_cbt.views import exam_view, intro_view, result_view

logger = logging.getLogger(__name__)

st.set_page_config(page_title="Assessment CBT", page_icon="📋", layout="wide")

# ── 공통 스타일 (views/*에서 쓰는 클래스) ───────────────────────────────────
_CSS = """
<style>
.icon-circle { width:64px; height:64px; margin:24px auto 8px; border-radius:50%;
               background:#eef2ff; display:flex; align-items:center; justify-content:center;
               font-size:1.8rem; }
.cbt-title { text-align:center; font-size:1.5rem; font-weight:700; color:#1a1a2e; }
.cbt-divider { border:none; border-top:1px solid #e5e7eb; margin:16px 0; }
.question-number-badge { background:#4a7fcb; color:#fff; border-radius:999px;
                         padding:2px 12px; font-size:0.8rem; font-weight:600; }
.question-card { background:#f9fafb; border:1px solid #e5e7eb; border-radius:12px;
                 padding:20px 24px; margin-bottom:16px; }
.timer-display { font-size:1.6rem; font-weight:700; text-align:center; color:#1a1a2e;
                 font-variant-numeric:tabular-nums; }
.timer-warning { color:#f59e0b; }
.timer-critical { color:#ef4444; }
.score-big { text-align:center; font-size:4rem; font-weight:800; margin:8px 0; }
.pass-badge { padding:4px 16px; border-radius:999px; font-weight:700; }
.pass-badge.pass { background:#d1fae5; color:#065f46; }
.pass-badge.fail { background:#fee2e2; color:#991b1b; }
</style>
"""
st.markdown(_CSS, unsafe_allow_html=True)


@st.cache_resource
def _store() -> StoreClient:
    return StoreClient(STORE_URL, STORE_API_KEY)


def _controller_for(assessment_id: str) -> TestSessionController | None:
    """세션별 컨트롤러. 다른 평가 ID로 들어오면 새 응시로 교체한다."""
    controller: TestSessionController | None = st.session_state.get("controller")
    if controller is not None and st.session_state.get("assessment_id") == assessment_id:
        return controller

    if controller is not None:
        controller.abandon()

    auth = st.session_state.auth
    controller = TestSessionController(
        AssessmentRepository(_store().with_token(auth.access_token)),
        SystemClock(),
        auth.user_id,
    )
    st.session_state.controller = controller
    st.session_state.assessment_id = assessment_id

    with st.spinner("평가를 불러오는 중입니다..."):
        try:
            controller.load(assessment_id)
        except AssessmentLoadError as e:
            # FAILED 단계로 남아 main()에서 안내된다
            logger.info(f"평가 로드 실패 안내: {e}")
    return controller


def main() -> None:
    assessment_id = st.query_params.get("id")
    if not assessment_id:
        st.error("평가가 지정되지 않았습니다.")
        st.link_button("홈으로", SAFE_LANDING_URL)
        return

    if st.session_state.get("auth") is None:
        intro_view.render_login(_store())
        return

    controller = _controller_for(assessment_id)
    phase = controller.phase

    if phase is AttemptPhase.FAILED:
        view = controller.view()
        st.error(view.error)
        st.link_button("홈으로", view.redirect or SAFE_LANDING_URL)
    elif phase is AttemptPhase.INTRO:
        intro_view.render(controller)
    elif phase is AttemptPhase.IN_PROGRESS:
        exam_view.render(controller)
    elif phase is AttemptPhase.SUBMITTING:
        exam_view.render_submitting(controller)
    elif phase is AttemptPhase.RESULT:
        result_view.render(controller)


main()
