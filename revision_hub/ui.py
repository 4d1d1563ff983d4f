"""
ui.py
======================

Streamlit ベースの UI コンポーネントをまとめたモジュール。

責務:
- テーマと CSS の注入（起動時に 1 度）
- ダッシュボード（試験カード一覧）の描画
- クイズ画面（問題・選択肢・解説・PDF ビューア）の描画
- 終了画面（スコア）の描画

ここでは「見た目」と「ユーザー操作の入力」だけを扱い、
状態遷移は session.QuizController 側に任せる。

戻り値として「何が押されたか」を dict で返す。
"""

from __future__ import annotations

from html import escape
from typing import Any, Dict, Optional

import streamlit as st
import streamlit.components.v1 as components

from .pdf_ref import pdf_file_label
from .session import QuizState

# ----------------------------------------------------------------------
#  テーマ定義
# ----------------------------------------------------------------------


THEMES: Dict[str, Dict[str, str]] = {
    "light": {
        "bg": "#f8fafc",
        "text": "#1e293b",
        "surface": "#f1f5f9",
        "surface_alt": "#ffffff",
        "border": "#e2e8f0",
        "primary": "#2563eb",
        "correct": "#16a34a",
        "incorrect": "#dc2626",
        "warning": "#b45309",
    },
    "dark": {
        "bg": "#0f172a",
        "text": "#f1f5f9",
        "surface": "#1e293b",
        "surface_alt": "#334155",
        "border": "#475569",
        "primary": "#60a5fa",
        "correct": "#4ade80",
        "incorrect": "#f87171",
        "warning": "#fbbf24",
    },
}

PDF_VIEWER_HEIGHT = 720


# ----------------------------------------------------------------------
#  CSS 生成
# ----------------------------------------------------------------------
def _generate_css(theme: Dict[str, str]) -> str:
    """テーマに応じたグローバル CSS を生成する。"""

    return f"""
    <style>
    .rh-header {{
        display: flex;
        justify-content: space-between;
        align-items: center;
        gap: 0.5rem;
        margin-bottom: 0.75rem;
    }}

    .rh-app-title {{
        font-weight: 700;
        font-size: 1.25rem;
        color: {theme['text']};
    }}

    .rh-banner {{
        padding: 0.75rem 1rem;
        border-radius: 12px;
        border: 1px solid {theme['warning']}55;
        background: {theme['warning']}11;
        color: {theme['warning']};
        font-size: 0.9rem;
        margin-bottom: 1rem;
    }}

    .rh-card {{
        background: {theme['surface_alt']};
        border: 1px solid {theme['border']};
        border-radius: 16px;
        padding: 1.1rem;
        margin-bottom: 0.5rem;
    }}

    .rh-card-top {{
        display: flex;
        justify-content: space-between;
        margin-bottom: 0.6rem;
    }}

    .rh-tag {{
        padding: 0.1rem 0.5rem;
        border-radius: 6px;
        background: {theme['primary']}18;
        color: {theme['primary']};
        font-size: 0.7rem;
        font-weight: 700;
        text-transform: uppercase;
    }}

    .rh-year {{
        padding: 0.1rem 0.5rem;
        border-radius: 6px;
        background: {theme['surface']};
        font-size: 0.75rem;
        font-weight: 700;
    }}

    .rh-card-title {{
        font-weight: 700;
        font-size: 1.05rem;
        margin-bottom: 0.3rem;
    }}

    .rh-card-desc {{
        font-size: 0.85rem;
        opacity: 0.8;
    }}

    .rh-question-box {{
        background: {theme['surface_alt']};
        padding: 1rem;
        border-radius: 12px;
        border: 1px solid {theme['border']};
        font-size: 1.05rem;
        font-weight: 600;
        line-height: 1.6;
        margin: 0.5rem 0 0.75rem 0;
    }}

    .rh-explanation-box {{
        padding: 0.9rem;
        border-radius: 10px;
        background: {theme['correct']}11;
        border: 1px solid {theme['correct']}55;
        font-size: 0.95rem;
        line-height: 1.6;
        margin-top: 0.75rem;
    }}

    .rh-score {{
        font-family: monospace;
        font-weight: 700;
    }}

    .rh-pdf-placeholder {{
        height: 300px;
        display: flex;
        flex-direction: column;
        align-items: center;
        justify-content: center;
        border-radius: 12px;
        background: {theme['surface']};
        color: {theme['text']}99;
    }}

    .rh-end {{
        text-align: center;
        padding: 2rem 1rem;
    }}

    .rh-end-percent {{
        font-size: 3rem;
        font-weight: 900;
    }}
    </style>
    """


# ----------------------------------------------------------------------
#  ページ設定 / テーマ（起動時に 1 度だけ）
# ----------------------------------------------------------------------
def setup_page(app_name: str, theme_key: str = "light") -> str:
    """ページ設定と CSS を注入し、実際に使うテーマキーを返す。"""
    st.set_page_config(page_title=app_name, page_icon="🎓", layout="wide")

    if "theme" not in st.session_state:
        st.session_state["theme"] = theme_key if theme_key in THEMES else "light"
    key = st.session_state["theme"]
    if key not in THEMES:
        key = "light"
        st.session_state["theme"] = key

    st.markdown(_generate_css(THEMES[key]), unsafe_allow_html=True)
    return key


def _render_banner(message: Optional[str]) -> None:
    if message:
        st.markdown(f"<div class='rh-banner'>{escape(message)}</div>", unsafe_allow_html=True)


# ----------------------------------------------------------------------
#  公開 API: ダッシュボード
# ----------------------------------------------------------------------
def render_dashboard(
    state: QuizState,
    *,
    app_name: str,
    api_status: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    試験カード一覧を描画する。

    戻り値:
        {"start_exam_id": Optional[str]}   # 「開始」が押された試験
    """
    start_exam_id: Optional[str] = None

    st.markdown(
        "<div class='rh-header'>"
        f"<div class='rh-app-title'>🎓 {escape(app_name)}</div>"
        "</div>",
        unsafe_allow_html=True,
    )

    col_title, col_status = st.columns([3, 1])
    with col_title:
        st.caption("試験一覧（データディレクトリの JSON ファイルから読み込み）")
    with col_status:
        if state.loading:
            st.caption("読み込み中...")
        elif api_status is not None:
            label = "API: OK" if api_status.get("status") == "healthy" else "API: 異常"
            st.caption(label)

    _render_banner(state.error_message)

    if not state.manifest:
        st.info("表示できる試験がありません。")
        return {"start_exam_id": None}

    columns = st.columns(3)
    for i, item in enumerate(state.manifest):
        exam_id = str(item.get("id", ""))
        with columns[i % 3]:
            st.markdown(
                "<div class='rh-card'>"
                "<div class='rh-card-top'>"
                f"<span class='rh-tag'>{escape(str(item.get('subject', '')))}</span>"
                f"<span class='rh-year'>{escape(str(item.get('year', '')))}</span>"
                "</div>"
                f"<div class='rh-card-title'>{escape(str(item.get('title', '')))}</div>"
                f"<div class='rh-card-desc'>{escape(str(item.get('description', '')))}</div>"
                "</div>",
                unsafe_allow_html=True,
            )
            if st.button(
                "開いています..." if state.loading else "開始",
                key=f"rh_start_{exam_id}",
                disabled=state.loading,
                use_container_width=True,
            ):
                start_exam_id = exam_id

    return {"start_exam_id": start_exam_id}


# ----------------------------------------------------------------------
#  公開 API: クイズ画面
# ----------------------------------------------------------------------
def _option_label(state: QuizState, idx: int, text: str) -> str:
    q = state.current_question
    is_selected = idx in state.selected

    if state.show_explanation and q is not None:
        if idx in q.correct:
            return f"✅ {text}"
        if is_selected:
            return f"❌ {text}"
        return f"▫️ {text}"

    if state.is_multi:
        return f"{'☑' if is_selected else '☐'} {text}"
    return f"{'◉' if is_selected else '○'} {text}"


def render_quiz(state: QuizState, *, assets_base_url: str = "") -> Dict[str, Any]:
    """
    クイズ画面を描画し、ユーザー操作の結果を返す。

    戻り値:
        {
          "toggled": Optional[int],   # 押された選択肢 index
          "clicked_validate": bool,
          "clicked_next": bool,
          "clicked_close": bool,
        }
    """
    toggled: Optional[int] = None
    clicked_validate = False
    clicked_next = False
    clicked_close = False

    exam_title = (state.active_exam or {}).get("title") or "試験"

    col_quiz, col_pdf = st.columns([5, 7])

    with col_quiz:
        col_back, col_title, col_score = st.columns([1, 2, 1])
        with col_back:
            if st.button("← メニュー", key="rh_close"):
                clicked_close = True
        with col_title:
            st.markdown(f"**{escape(str(exam_title))}**")
        with col_score:
            st.markdown(
                f"<div class='rh-score'>{state.score_label}</div>",
                unsafe_allow_html=True,
            )

        q = state.current_question
        if q is None:
            st.info("問題が読み込まれていません。")
        else:
            st.caption(f"{state.current_index + 1} / {state.total_questions}・{q.category}")
            st.markdown(
                f"<div class='rh-question-box'>{escape(q.question)}</div>",
                unsafe_allow_html=True,
            )
            if q.is_multi:
                st.caption(f"{len(q.correct)} つ選んでください")

            for idx, text in enumerate(q.options):
                if st.button(
                    _option_label(state, idx, text),
                    key=f"rh_opt_{state.current_index}_{idx}",
                    use_container_width=True,
                    disabled=state.show_explanation,
                ):
                    toggled = idx

            if state.show_explanation:
                st.markdown(
                    "<div class='rh-explanation-box'><b>解説</b><br>"
                    f"{escape(q.explanation)}</div>",
                    unsafe_allow_html=True,
                )
                if state.pdf_src:
                    st.link_button(
                        f"📄 PDF を開く（{state.current_page} ページ）",
                        assets_base_url + state.pdf_src,
                    )

        if state.show_explanation or q is None:
            if st.button("次の問題 ▶", key="rh_next", type="primary", use_container_width=True):
                clicked_next = True
        else:
            if st.button(
                "解答する",
                key="rh_validate",
                type="primary",
                use_container_width=True,
                disabled=not state.selected,
            ):
                clicked_validate = True

    with col_pdf:
        _render_pdf_viewer(state, assets_base_url)

    return {
        "toggled": toggled,
        "clicked_validate": clicked_validate,
        "clicked_next": clicked_next,
        "clicked_close": clicked_close,
    }


def _render_pdf_viewer(state: QuizState, assets_base_url: str) -> None:
    """解答後に該当ページの PDF を埋め込み表示する。"""
    if not state.pdf_src:
        st.markdown(
            "<div class='rh-pdf-placeholder'>"
            "<div>📖 ここに資料が表示されます</div>"
            "<div style='font-size:0.8rem;'>解答すると該当ページに移動します。</div>"
            "</div>",
            unsafe_allow_html=True,
        )
        return

    st.caption(f"📄 {pdf_file_label(state.pdf_src)}")
    components.iframe(assets_base_url + state.pdf_src, height=PDF_VIEWER_HEIGHT)


# ----------------------------------------------------------------------
#  公開 API: 終了画面
# ----------------------------------------------------------------------
def render_end(state: QuizState) -> Dict[str, Any]:
    """
    戻り値:
        {"clicked_restart": bool, "clicked_close": bool}
    """
    clicked_restart = False
    clicked_close = False

    _render_banner(state.error_message)

    st.markdown(
        "<div class='rh-end'>"
        "<h2>終了！</h2>"
        f"<div class='rh-end-percent'>{state.score_percent}%</div>"
        f"<div>{state.score_label}</div>"
        "</div>",
        unsafe_allow_html=True,
    )

    _left, center, _right = st.columns([1, 2, 1])
    with center:
        if st.button(
            "もう一度",
            key="rh_restart",
            type="primary",
            use_container_width=True,
            disabled=state.loading,
        ):
            clicked_restart = True
        if st.button("メニューに戻る", key="rh_end_close", use_container_width=True):
            clicked_close = True

    return {"clicked_restart": clicked_restart, "clicked_close": clicked_close}
