"""
app.py
======================

Revision Hub（試験対策クイズアプリ / Streamlit）エントリーポイント。

特徴:
- ダッシュボード → クイズ → 結果 の 3 画面構成
- 試験データは API サーバー（revision_hub.api）から取得
- 解答後に該当する PDF 資料のページを横に表示

前提:
- API サーバーが起動している（python -m revision_hub.api）
- REVISION_HUB_API_URL または config.toml の [api].base_url で接続先を指定できる
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import streamlit as st

from revision_hub.client import ExamApiClient
from revision_hub.config import AppConfig
from revision_hub.session import VIEW_END, VIEW_QUIZ, QuizController
from revision_hub.ui import render_dashboard, render_end, render_quiz, setup_page


# ----------------------------------------------------------------------
#  設定 / コントローラのセッション保持
# ----------------------------------------------------------------------
def get_app_config() -> AppConfig:
    if "app_config" not in st.session_state:
        st.session_state["app_config"] = AppConfig.from_toml()
    return st.session_state["app_config"]  # type: ignore[return-value]


@st.cache_resource
def get_fetch_executor() -> ThreadPoolExecutor:
    """全セッションで共有するワーカー（セッションごとにスレッドを増やさない）。"""
    return ThreadPoolExecutor(max_workers=4, thread_name_prefix="quiz-fetch")


def get_controller() -> QuizController:
    """QuizController をセッションに保持して返す。初回のみカタログを取得する。"""
    if "quiz_controller" not in st.session_state:
        cfg = get_app_config()
        client = ExamApiClient(cfg.api_base_url, timeout=cfg.request_timeout)
        controller = QuizController(client, executor=get_fetch_executor())
        controller.load_manifest()
        st.session_state["quiz_controller"] = controller
    return st.session_state["quiz_controller"]  # type: ignore[return-value]


def _wait_and_rerun(future) -> None:
    if future is not None:
        # 結果の適用（または破棄）が終わるまで待つ
        future.result()
    st.rerun()


# ----------------------------------------------------------------------
#  ページ: ダッシュボード
# ----------------------------------------------------------------------
def render_dashboard_page(controller: QuizController, cfg: AppConfig) -> None:
    ui_result = render_dashboard(
        controller.state,
        app_name=cfg.app_name,
        api_status=controller.api_status(),
    )
    if ui_result["start_exam_id"]:
        _wait_and_rerun(controller.start(ui_result["start_exam_id"]))


# ----------------------------------------------------------------------
#  ページ: クイズ
# ----------------------------------------------------------------------
def render_quiz_page(controller: QuizController, cfg: AppConfig) -> None:
    ui_result = render_quiz(controller.state, assets_base_url=cfg.assets_base_url)

    if ui_result["clicked_close"]:
        controller.close()
        st.rerun()
    elif ui_result["toggled"] is not None:
        controller.toggle(ui_result["toggled"])
        st.rerun()
    elif ui_result["clicked_validate"]:
        controller.validate()
        st.rerun()
    elif ui_result["clicked_next"]:
        controller.advance()
        st.rerun()


# ----------------------------------------------------------------------
#  ページ: 終了
# ----------------------------------------------------------------------
def render_end_page(controller: QuizController) -> None:
    ui_result = render_end(controller.state)

    if ui_result["clicked_restart"]:
        _wait_and_rerun(controller.restart())
    elif ui_result["clicked_close"]:
        controller.close()
        st.rerun()


# ----------------------------------------------------------------------
#  メイン
# ----------------------------------------------------------------------
def main() -> None:
    cfg = get_app_config()
    setup_page(cfg.app_name, cfg.theme)

    controller = get_controller()
    view = controller.state.view

    if view == VIEW_QUIZ:
        render_quiz_page(controller, cfg)
    elif view == VIEW_END:
        render_end_page(controller)
    else:
        render_dashboard_page(controller, cfg)


if __name__ == "__main__":
    main()
