# User-facing messages shown by the Streamlit page
INVALID_FILE_MESSAGE = "Please select a valid image file"
MISSING_FILE_MESSAGE = "Please select a file first"
PREDICTION_FAILED_MESSAGE = "Failed to get prediction. Please try again."


class PredictionError(Exception):
    """The prediction service could not produce a usable result."""


class PreviewReleasedError(RuntimeError):
    """A preview handle was used after it was released."""


class InvalidImageError(ValueError):
    """Uploaded bytes could not be decoded as an image."""


class ModelServerError(Exception):
    """The model server was unreachable or answered with something unusable."""
