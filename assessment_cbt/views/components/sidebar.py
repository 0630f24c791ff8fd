"""
views/components/sidebar.py

문제 번호 네비게이션 그리드 컴포넌트.
각 번호를 클릭하면 해당 문제로 바로 이동한다.
"""

from __future__ import annotations

import streamlit as st

from assessment_cbt.models.view_model import AttemptView
from assessment_cbt.services.test_controller import TestSessionController


def render(controller: TestSessionController, view: AttemptView) -> None:
    """
    사이드바에 문제 번호 버튼 그리드와 진행 현황을 렌더링한다.

    버튼 표시:
      - 현재 문제: primary 버튼
      - 답한 문제: 번호 뒤 ✓
      - 미답 문제: 번호만
    """
    total = view.total

    # ── 진행 현황 ──────────────────────────────────────────────────────────
    st.markdown(
        f"""
        <div style="display:flex; justify-content:space-between;
                    font-size:0.8rem; color:#6b7280; margin-bottom:4px;">
            <span>답변 완료</span>
            <span><b>{view.answered_count}</b> / {total}</span>
        </div>
        """,
        unsafe_allow_html=True,
    )
    st.progress(view.progress_percent / 100)

    # ── 문제 번호 그리드 (5열) ─────────────────────────────────────────────
    cols_per_row = 5

    for row_start in range(0, total, cols_per_row):
        cols = st.columns(cols_per_row)
        for col_idx, q_idx in enumerate(range(row_start, min(row_start + cols_per_row, total))):
            mark = " ✓" if view.answered[q_idx] else ""
            with cols[col_idx]:
                if st.button(
                    f"{q_idx + 1}{mark}",
                    key=f"nav_{q_idx}",
                    type="primary" if q_idx == view.current_index else "secondary",
                    help=f"문제 {q_idx + 1}번으로 이동",
                ):
                    controller.go_to(q_idx)
                    st.rerun()
