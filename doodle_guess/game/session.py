"""
Player-side game state: canvas, selected model, current guess, error and
the bounded guess history.

submit() may be called again while an earlier submission is still in flight.
Nothing orders the responses: each one is applied when it resolves, so the
display shows whichever response arrived last. `analyzing` only reflects
whether anything is still pending.
"""
import threading
from datetime import datetime

import httpx

from doodle_guess.canvas.surface import StrokeSurface
from doodle_guess.config.models import DEFAULT_MODEL
from doodle_guess.game.history import GuessHistory, HISTORY_CAPACITY
from doodle_guess.orchestrator.contracts import GuessResult

ANALYZE_PATH = "/analyze-drawing"
MSG_FAILED = "分析失败"
MSG_FAILED_RETRY = "分析失败，请重试"

STATE_DRAWING = "绘画中"
STATE_ANALYZING = "AI分析中"
STATE_WAITING = "等待绘画"


class GameSession:
    def __init__(self, client: httpx.Client, surface: StrokeSurface | None = None,
                 selected_model: str = DEFAULT_MODEL, history_capacity: int = HISTORY_CAPACITY):
        self.client = client
        self.surface = surface or StrokeSurface()
        self.selected_model = selected_model
        self.history = GuessHistory(history_capacity)
        self.current_guess = ""
        self.current_model = ""
        self.error = ""
        self._pending = 0
        self._lock = threading.Lock()

    @property
    def analyzing(self) -> bool:
        return self._pending > 0

    @property
    def total_guesses(self) -> int:
        return len(self.history)

    @property
    def state_label(self) -> str:
        if self.surface.active:
            return STATE_DRAWING
        if self.analyzing:
            return STATE_ANALYZING
        return STATE_WAITING

    def dismiss_error(self):
        self.error = ""

    def submit(self) -> GuessResult | None:
        """Send the current drawing for a guess. Returns the new GuessResult, or None on failure."""
        image_data = self.surface.export()
        model_name = self.selected_model
        with self._lock:
            self._pending += 1
            self.error = ""
        try:
            data = self._post(image_data, model_name)
        except _SubmitError as e:
            with self._lock:
                self.error = e.message
            return None
        finally:
            with self._lock:
                self._pending -= 1
        return self._apply(data)

    def _post(self, image_data: str, model_name: str) -> dict:
        try:
            resp = self.client.post(ANALYZE_PATH, json={"imageData": image_data, "modelName": model_name})
        except httpx.HTTPError as e:
            raise _SubmitError(MSG_FAILED_RETRY) from e

        try:
            data = resp.json()
        except ValueError:
            data = None

        if not resp.is_success:
            msg = data.get("error") if isinstance(data, dict) else None
            raise _SubmitError(msg or MSG_FAILED)
        if not isinstance(data, dict) or not isinstance(data.get("guess"), str):
            raise _SubmitError(MSG_FAILED_RETRY)
        return data

    def _apply(self, data: dict) -> GuessResult:
        result = GuessResult(guess=data["guess"], timestamp=datetime.now(), model=data.get("model"))
        with self._lock:
            self.current_guess = result.guess
            self.current_model = result.model or ""
            self.history.push(result)
        return result


class _SubmitError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
