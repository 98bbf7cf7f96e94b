from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import weakref

import requests

from lungscan.errors import (
    INVALID_FILE_MESSAGE,
    MISSING_FILE_MESSAGE,
    PREDICTION_FAILED_MESSAGE,
    PredictionError,
)
from lungscan.frontend.preview import PreviewHandle
from lungscan.logging import get_logger

logger = get_logger(__name__)

IMAGE_MIME_PREFIX = "image/"
LABEL_FIELD = "predicted_class"


class Phase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"


@dataclass(frozen=True)
class SelectedFile:
    name: str
    mime_type: str
    content: bytes = field(repr=False)

    @classmethod
    def from_upload(cls, upload) -> SelectedFile:
        """Build from a Streamlit ``UploadedFile``."""
        return cls(name=upload.name, mime_type=upload.type or "", content=upload.getvalue())

    @property
    def is_image(self) -> bool:
        return self.mime_type.lower().startswith(IMAGE_MIME_PREFIX)


@dataclass(frozen=True)
class PredictionResult:
    label: str
    filename: str
    confidence: float | None = None
    probabilities: dict[str, float] | None = None


@dataclass
class ControllerState:
    selected_file: SelectedFile | None = None
    preview: PreviewHandle | None = None
    phase: Phase = Phase.IDLE
    error: str | None = None
    result: PredictionResult | None = None

    @property
    def is_loading(self) -> bool:
        return self.phase is Phase.LOADING


def parse_prediction(body, filename: str) -> PredictionResult:
    """Turn a decoded service response into a PredictionResult.

    Only ``predicted_class`` is required. ``confidence`` and
    ``probabilities`` are kept when they are well formed and ignored
    otherwise.
    """
    if not isinstance(body, dict):
        raise PredictionError(f"expected a JSON object, got {type(body).__name__}")
    label = body.get(LABEL_FIELD)
    if not isinstance(label, str) or not label.strip():
        raise PredictionError(f"response has no usable {LABEL_FIELD!r}")

    confidence = body.get("confidence")
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        confidence = None

    probabilities = body.get("probabilities")
    if isinstance(probabilities, dict) and all(
        isinstance(k, str) and isinstance(v, (int, float)) and not isinstance(v, bool)
        for k, v in probabilities.items()
    ):
        probabilities = {k: float(v) for k, v in probabilities.items()}
    else:
        probabilities = None

    return PredictionResult(
        label=label,
        filename=filename,
        confidence=float(confidence) if confidence is not None else None,
        probabilities=probabilities or None,
    )


def _teardown(state, session) -> None:
    if state.preview is not None:
        state.preview.release()
        state.preview = None
    if session is not None:
        session.close()


class UploadPredictController:
    """Owns the upload/preview/predict state of one page session."""

    def __init__(self, predict_url: str, session=None, timeout: float | None = None) -> None:
        self.predict_url = predict_url
        self.timeout = timeout
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()
        self._state = ControllerState()
        # Streamlit has no session-end hook; release when the session state drops us
        weakref.finalize(self, _teardown, self._state, self._session if self._owns_session else None)

    @property
    def state(self) -> ControllerState:
        return self._state

    def __enter__(self) -> UploadPredictController:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _release_preview(self) -> None:
        if self._state.preview is not None:
            self._state.preview.release()
            self._state.preview = None

    def select_file(self, candidate: SelectedFile | None) -> bool:
        """Accept an image file for submission, or reject anything else.

        Returns True when the candidate was accepted. Selections made while
        a request is in flight are ignored so the preview always matches
        what was submitted.
        """
        if self._state.is_loading:
            logger.warning("Ignoring file selection while a prediction is in flight")
            return False

        self._release_preview()

        if candidate is None or not candidate.is_image:
            mime = candidate.mime_type if candidate is not None else None
            logger.info("Rejected selection mime_type=%r", mime)
            self._state.error = INVALID_FILE_MESSAGE
            self._state.selected_file = None
            return False

        self._state.selected_file = candidate
        self._state.error = None
        self._state.preview = PreviewHandle.acquire(candidate)
        logger.info(
            "Selected %s (%s, %d bytes)", candidate.name, candidate.mime_type, len(candidate.content)
        )
        return True

    def submit(self, on_transition=None) -> None:
        """Send the selected file to the prediction service.

        ``on_transition`` is called with the state after the phase moves to
        LOADING and again after it returns to IDLE.
        """
        selected = self._state.selected_file
        if selected is None:
            self._state.error = MISSING_FILE_MESSAGE
            return

        self._state.phase = Phase.LOADING
        self._state.error = None
        try:
            if on_transition is not None:
                on_transition(self._state)
            result = self._request_prediction(selected)
        except PredictionError as exc:
            logger.warning("Prediction failed for %s: %s", selected.name, exc)
            self._state.error = PREDICTION_FAILED_MESSAGE
        else:
            logger.info("Prediction for %s: %s", selected.name, result.label)
            self._state.result = result
        finally:
            self._state.phase = Phase.IDLE
            if on_transition is not None:
                on_transition(self._state)

    def _request_prediction(self, selected: SelectedFile) -> PredictionResult:
        files = {"file": (selected.name, selected.content, selected.mime_type)}
        try:
            response = self._session.post(self.predict_url, files=files, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            raise PredictionError(f"request to {self.predict_url} failed: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise PredictionError(f"service answered HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError as exc:
            raise PredictionError("response body is not valid JSON") from exc
        return parse_prediction(body, selected.name)

    def close(self) -> None:
        _teardown(self._state, self._session if self._owns_session else None)
