from lungscan.frontend.view import project

# Picker-level filter only, the controller re-checks the MIME type
IMAGE_EXTENSIONS = ["png", "jpg", "jpeg", "bmp", "gif", "tif", "tiff", "webp"]
UPLOAD_KEY = "ct_scan_upload"
SUBMIT_KEY = "submit"


def draw_picker(slot, view, key=UPLOAD_KEY, on_change=None):
    return slot.file_uploader(
        "Choose a CT scan image...",
        type=IMAGE_EXTENSIONS,
        key=key,
        on_change=on_change,
        disabled=not view.picker_enabled,
    )


def draw_submit(slot, view, key=SUBMIT_KEY):
    return slot.button(
        view.submit_label,
        type="primary",
        disabled=not view.submit_enabled,
        key=key,
    )


class TransitionRedraw:
    """Redraws the picker and submit button while a submission runs.

    The page is drawn once before the click, so both controls are
    replaced in their slots on every phase change. Keys carry the phase
    so the replacements never collide with the original widgets.
    """

    def __init__(self, picker_slot, button_slot):
        self.picker_slot = picker_slot
        self.button_slot = button_slot

    def __call__(self, state):
        view = project(state)
        suffix = state.phase.value
        draw_picker(self.picker_slot, view, key=f"{UPLOAD_KEY}-{suffix}")
        draw_submit(self.button_slot, view, key=f"{SUBMIT_KEY}-{suffix}")
