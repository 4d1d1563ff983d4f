"""
session.py
======================

クイズ画面の状態遷移（dashboard → quiz → end）。

- QuizState はイミュータブルな dataclass
- 遷移関数はすべて (state, ...) -> 新しい state の純粋関数
- QuizController が state を保持し、API 呼び出しと遷移の適用を担当する

「試験を開始」の多重実行について:
request_start() のたびに start_seq を 1 つ進め、その番号（ticket）を
非同期の取得処理に持たせる。結果が返ってきた時点で ticket が最新でなければ
その結果は捨てる。遅れて届いた古い応答が新しい状態を上書きすることはない。
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .client import ApiClientError, ExamApiClient
from .models import Question
from .pdf_ref import build_pdf_src

logger = logging.getLogger(__name__)

VIEW_DASHBOARD = "dashboard"
VIEW_QUIZ = "quiz"
VIEW_END = "end"

MANIFEST_ERROR_MESSAGE = "試験カタログを読み込めませんでした。API サーバーのログを確認してください。"
START_ERROR_MESSAGE = "試験を開けませんでした。JSON ファイルとパスを確認してください。"
HEALTH_CACHE_SECONDS = 30.0


# ----------------------------------------------------------------------
#  状態
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class QuizState:
    view: str = VIEW_DASHBOARD
    manifest: Tuple[Dict[str, Any], ...] = ()

    active_exam_id: Optional[str] = None
    active_exam: Optional[Dict[str, Any]] = None
    questions: Tuple[Question, ...] = ()

    current_index: int = 0
    # 選択順を保持した index の列（重複なし）
    selected: Tuple[int, ...] = ()
    score: int = 0
    show_explanation: bool = False
    pdf_src: str = ""
    current_page: int = 1

    loading: bool = False
    error_message: Optional[str] = None
    # 最後に発行した「開始」リクエストの番号
    start_seq: int = 0

    # ---------- 派生値 ----------

    @property
    def current_question(self) -> Optional[Question]:
        if 0 <= self.current_index < len(self.questions):
            return self.questions[self.current_index]
        return None

    @property
    def is_multi(self) -> bool:
        q = self.current_question
        return q is not None and q.is_multi

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def score_label(self) -> str:
        return f"{self.score} / {self.total_questions}"

    @property
    def score_percent(self) -> int:
        if self.total_questions <= 0:
            return 0
        # 0.5 は切り上げ
        return int(self.score * 100 / self.total_questions + 0.5)


def _reset_question(state: QuizState, **changes: Any) -> QuizState:
    """問題ごとの一時状態（選択・解説・PDF・ページ）を初期化する。"""
    return replace(
        state,
        selected=(),
        show_explanation=False,
        pdf_src="",
        current_page=1,
        **changes,
    )


# ----------------------------------------------------------------------
#  カタログ
# ----------------------------------------------------------------------
def manifest_loaded(state: QuizState, entries: Sequence[Dict[str, Any]]) -> QuizState:
    return replace(state, manifest=tuple(entries))


def manifest_failed(state: QuizState, message: str = MANIFEST_ERROR_MESSAGE) -> QuizState:
    return replace(state, manifest=(), error_message=message)


# ----------------------------------------------------------------------
#  開始 / 再開始
# ----------------------------------------------------------------------
def request_start(state: QuizState, exam_id: str) -> Tuple[QuizState, int]:
    """新しい開始リクエストを発行し、(新 state, ticket) を返す。"""
    ticket = state.start_seq + 1
    return replace(state, start_seq=ticket, loading=True, error_message=None), ticket


def is_current(state: QuizState, ticket: int) -> bool:
    return ticket == state.start_seq


def start_succeeded(
    state: QuizState,
    ticket: int,
    exam: Dict[str, Any],
    questions: Sequence[Question],
    exam_id: Optional[str] = None,
) -> QuizState:
    if not is_current(state, ticket):
        return state
    return _reset_question(
        state,
        view=VIEW_QUIZ,
        active_exam_id=(exam or {}).get("id") or exam_id,
        active_exam=exam,
        questions=tuple(questions),
        current_index=0,
        score=0,
        loading=False,
        error_message=None,
    )


def start_failed(state: QuizState, ticket: int, message: str = START_ERROR_MESSAGE) -> QuizState:
    # 画面は遷移させない（dashboard / end のまま）
    if not is_current(state, ticket):
        return state
    return replace(state, loading=False, error_message=message)


def request_restart(state: QuizState) -> Tuple[QuizState, Optional[int]]:
    if state.view != VIEW_END or not state.active_exam_id:
        return state, None
    return request_start(state, state.active_exam_id)


# ----------------------------------------------------------------------
#  クイズ中の操作
# ----------------------------------------------------------------------
def toggle_option(state: QuizState, idx: int) -> QuizState:
    q = state.current_question
    if state.view != VIEW_QUIZ or q is None:
        return state
    # 解答確定後は選択を固定する
    if state.show_explanation:
        return state
    if not 0 <= idx < len(q.options):
        return state

    if not q.is_multi:
        return replace(state, selected=(idx,))

    if idx in state.selected:
        return replace(state, selected=tuple(i for i in state.selected if i != idx))
    return replace(state, selected=state.selected + (idx,))


def is_exact_match(selected: Sequence[int], correct: Sequence[int]) -> bool:
    """部分点なし: 個数も要素も完全一致したときだけ正解。"""
    return len(selected) == len(correct) and set(selected) == set(correct)


def validate_answer(state: QuizState) -> QuizState:
    q = state.current_question
    if state.view != VIEW_QUIZ or q is None:
        return state
    if state.show_explanation or not state.selected:
        return state

    score = state.score + 1 if is_exact_match(state.selected, q.correct) else state.score
    return replace(
        state,
        score=score,
        pdf_src=build_pdf_src(q, state.active_exam),
        current_page=q.page or 1,
        show_explanation=True,
    )


def advance(state: QuizState) -> QuizState:
    # end からは restart / close 以外で出られない
    if state.view != VIEW_QUIZ:
        return state
    nxt = state.current_index + 1
    if nxt < len(state.questions):
        return _reset_question(state, current_index=nxt)
    return replace(state, view=VIEW_END)


def close_quiz(state: QuizState) -> QuizState:
    if state.view == VIEW_DASHBOARD:
        return state
    return _reset_question(
        state,
        view=VIEW_DASHBOARD,
        active_exam_id=None,
        active_exam=None,
        questions=(),
        current_index=0,
        score=0,
    )


# ----------------------------------------------------------------------
#  QuizController
# ----------------------------------------------------------------------
class QuizController:
    """
    QuizState を保持して遷移を適用するクラス（UI 1 画面につき 1 つ）。

    主な機能:
    - load_manifest(): 起動時に 1 度だけカタログを取得
    - start(): 試験を非同期に取得して開始（古いリクエストの結果は破棄）
    - api_status(): ヘルスチェック結果を一定時間キャッシュして返す
    - toggle() / validate() / advance() / close() / restart()

    executor を渡した場合は共有扱いとし、shutdown() では止めない。
    """

    def __init__(
        self,
        client: ExamApiClient,
        executor: Optional[ThreadPoolExecutor] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self._state = QuizState()
        self._lock = threading.Lock()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="quiz-fetch"
        )
        self._clock = clock
        self._status: Optional[Dict[str, Any]] = None
        self._status_at = 0.0

    @property
    def state(self) -> QuizState:
        return self._state

    def dispatch(self, transition: Callable[..., QuizState], *args: Any) -> QuizState:
        with self._lock:
            self._state = transition(self._state, *args)
            return self._state

    # ------------------------------------------------------------
    # カタログ
    # ------------------------------------------------------------
    def load_manifest(self) -> QuizState:
        """失敗してもリトライはしない（エラーバナー + 空リスト）。"""
        try:
            entries = self.client.list_exams()
        except ApiClientError as exc:
            logger.error("manifest fetch failed: %s", exc.message)
            return self.dispatch(manifest_failed, MANIFEST_ERROR_MESSAGE)
        return self.dispatch(manifest_loaded, entries)

    # ------------------------------------------------------------
    # ヘルスチェック
    # ------------------------------------------------------------
    def api_status(self, max_age: float = HEALTH_CACHE_SECONDS) -> Dict[str, Any]:
        """/health の結果を max_age 秒だけ使い回す（再描画ごとに問い合わせない）。"""
        now = self._clock()
        if self._status is not None and now - self._status_at < max_age:
            return self._status
        try:
            status = self.client.health()
        except ApiClientError as exc:
            logger.warning("health check failed: %s", exc.message)
            status = {"status": "unhealthy", "error": exc.message}
        self._status, self._status_at = status, now
        return status

    # ------------------------------------------------------------
    # 開始
    # ------------------------------------------------------------
    def start(self, exam_id: str) -> "Future[bool]":
        """
        試験の取得をワーカースレッドで開始する。

        戻り値の Future は結果を state に適用し終えてから完了し、
        結果が採用されたかどうか（最新のリクエストだったか）を返す。
        """
        with self._lock:
            self._state, ticket = request_start(self._state, exam_id)
        return self._executor.submit(self._run_start, ticket, exam_id)

    def restart(self) -> "Optional[Future[bool]]":
        with self._lock:
            self._state, ticket = request_restart(self._state)
            exam_id = self._state.active_exam_id
        if ticket is None or exam_id is None:
            return None
        return self._executor.submit(self._run_start, ticket, exam_id)

    def _run_start(self, ticket: int, exam_id: str) -> bool:
        try:
            payload = self.client.get_exam(exam_id)
            questions: List[Question] = [
                Question.from_dict(q) for q in payload.get("questions") or []
            ]
        except ApiClientError as exc:
            logger.error("exam fetch failed (%s): %s", exam_id, exc.message)
            return self._apply_failure(ticket, exc.message or START_ERROR_MESSAGE)
        except ValueError as exc:
            logger.error("invalid exam payload (%s): %s", exam_id, exc)
            return self._apply_failure(ticket, START_ERROR_MESSAGE)
        except Exception:
            logger.exception("unexpected error while starting exam %s", exam_id)
            return self._apply_failure(ticket, START_ERROR_MESSAGE)

        with self._lock:
            if not is_current(self._state, ticket):
                logger.debug("discarding stale start result (ticket=%d)", ticket)
                return False
            self._state = start_succeeded(
                self._state, ticket, payload.get("exam") or {}, questions, exam_id
            )
            return True

    def _apply_failure(self, ticket: int, message: str) -> bool:
        with self._lock:
            if not is_current(self._state, ticket):
                return False
            self._state = start_failed(self._state, ticket, message)
            return True

    # ------------------------------------------------------------
    # クイズ中の操作
    # ------------------------------------------------------------
    def toggle(self, idx: int) -> QuizState:
        return self.dispatch(toggle_option, idx)

    def validate(self) -> QuizState:
        return self.dispatch(validate_answer)

    def advance(self) -> QuizState:
        return self.dispatch(advance)

    def close(self) -> QuizState:
        return self.dispatch(close_quiz)

    def shutdown(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=False)
