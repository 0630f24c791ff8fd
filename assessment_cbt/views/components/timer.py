"""
views/components/timer.py

남은 시험 시간을 렌더링하는 컴포넌트.
카운트다운 자체는 컨트롤러의 시계가 1초마다 진행하며,
이 컴포넌트는 fragment를 1초마다 다시 그려 표시만 갱신한다.
"""

import streamlit as st

from assessment_cbt.models.session_state import AttemptPhase
from assessment_cbt.services.test_controller import TestSessionController

_ICONS = {"normal": "⏱ ", "warning": "⏳ ", "critical": "⚠️ "}
_CSS_CLASSES = {
    "normal": "timer-display",
    "warning": "timer-display timer-warning",
    "critical": "timer-display timer-critical",
}


@st.fragment(run_every=1)
def render(controller: TestSessionController) -> None:
    """남은 시간 표시. 시간 종료로 자동 제출되면 전체 화면을 다시 그린다."""
    view = controller.view()
    if view.phase is not AttemptPhase.IN_PROGRESS or view.timer is None:
        st.rerun()

    timer = view.timer
    st.markdown(
        f'<div class="{_CSS_CLASSES[timer.level]}">{_ICONS[timer.level]}{timer.display}</div>',
        unsafe_allow_html=True,
    )
