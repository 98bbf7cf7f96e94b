from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

SUBMIT_LABEL = "Analyze CT Scan"
PROCESSING_LABEL = "Processing..."
DISCLAIMER = (
    "This analysis is based on our AI model's interpretation of the CT scan. "
    "Please consult with a healthcare professional for medical advice."
)
PLACEHOLDER = "Upload a CT scan to see the preview and analysis results here"


@dataclass(frozen=True)
class ResultPanel:
    label: str
    filename: str
    confidence: float | None
    probabilities: dict[str, float] | None
    disclaimer: str = DISCLAIMER


@dataclass(frozen=True)
class ViewModel:
    preview_url: str | None
    selected_name: str | None
    result: ResultPanel | None
    show_placeholder: bool
    error: str | None
    submit_enabled: bool
    submit_label: str
    picker_enabled: bool


def project(state) -> ViewModel:
    """Everything the page draws, derived from controller state alone."""
    preview_url = state.preview.url if state.preview is not None else None

    result = None
    if state.result is not None:
        result = ResultPanel(
            label=state.result.label,
            filename=state.result.filename,
            confidence=state.result.confidence,
            probabilities=state.result.probabilities,
        )

    return ViewModel(
        preview_url=preview_url,
        selected_name=state.selected_file.name if state.selected_file is not None else None,
        result=result,
        show_placeholder=preview_url is None and result is None,
        error=state.error,
        submit_enabled=state.selected_file is not None and not state.is_loading,
        submit_label=PROCESSING_LABEL if state.is_loading else SUBMIT_LABEL,
        picker_enabled=not state.is_loading,
    )


def probability_table(probabilities: dict[str, float]) -> pd.DataFrame:
    df = pd.DataFrame({
        "Class": list(probabilities.keys()),
        "Probability": list(probabilities.values()),
    })
    df = df.sort_values("Probability", ascending=False, kind="stable").reset_index(drop=True)
    df["Probability"] = (df["Probability"] * 100).map("{:.2f}%".format)
    return df
