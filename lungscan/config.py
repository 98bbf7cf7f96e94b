import os

import dotenv

dotenv.load_dotenv('.env')

DEFAULT_PREDICT_URL = "http://127.0.0.1:8000/predict/"
DEFAULT_MODEL_URL = "http://model-server:8501/v1/models/lung_ct:predict"

# Classes of the Kaggle chest CT-scan dataset the model is trained on
DEFAULT_CLASS_LABELS = [
    'adenocarcinoma',
    'large.cell.carcinoma',
    'normal',
    'squamous.cell.carcinoma',
]


def _env_float(name, default):
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


def _env_int(name, default):
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


def _env_list(name, default):
    raw = os.environ.get(name, "")
    items = [item.strip() for item in raw.split(",") if item.strip()]
    return items or list(default)


def load_frontend_config():
    """Settings for the Streamlit client."""
    return {
        'predict_url': os.environ.get('PREDICT_URL', DEFAULT_PREDICT_URL),
        # Unset means the request waits as long as the service takes
        'request_timeout': _env_float('PREDICT_TIMEOUT', None),
        'log_level': os.environ.get('LUNGSCAN_LOG_LEVEL', 'INFO'),
    }


def load_backend_config():
    """Settings for the prediction service."""
    return {
        'model_url': os.environ.get('MODEL_URL', DEFAULT_MODEL_URL),
        'model_timeout': _env_float('MODEL_TIMEOUT', 30.0),
        'img_size': _env_int('IMG_SIZE', 224),
        'class_labels': _env_list('CLASS_LABELS', DEFAULT_CLASS_LABELS),
        'cors_origins': _env_list('CORS_ORIGINS', ['*']),
        'log_level': os.environ.get('LUNGSCAN_LOG_LEVEL', 'INFO'),
    }
