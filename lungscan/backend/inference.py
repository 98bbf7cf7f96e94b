import io

import numpy as np
import requests
from PIL import Image, UnidentifiedImageError

from lungscan.errors import InvalidImageError, ModelServerError


def preprocess_image(image_bytes, img_size):
    """Decode, resize and scale an upload into a single-image batch."""
    try:
        img = Image.open(io.BytesIO(image_bytes))
        img = img.convert("RGB")
    except (UnidentifiedImageError, OSError) as e:
        raise InvalidImageError(f"cannot decode image: {e}") from e
    img = img.resize((img_size, img_size))
    img_arr = np.array(img, dtype=np.float32) / 255.0
    img_arr = np.expand_dims(img_arr, axis=0)
    return img_arr


def request_scores(img_arr, model_url, timeout):
    """Send a batch to TensorFlow Serving and return the first score vector."""
    payload = {"instances": img_arr.tolist()}
    try:
        response = requests.post(model_url, json=payload, timeout=timeout)
        response.raise_for_status()
        predictions = response.json().get("predictions", [])
    except requests.exceptions.RequestException as e:
        raise ModelServerError(f"model server request failed: {e}") from e
    except (ValueError, AttributeError) as e:
        raise ModelServerError("model server returned a malformed body") from e

    if not predictions or not isinstance(predictions[0], list):
        raise ModelServerError("model server returned no predictions")
    try:
        return [float(score) for score in predictions[0]]
    except (TypeError, ValueError) as e:
        raise ModelServerError("model server returned non-numeric scores") from e


def classify(scores, class_labels):
    """Map a score vector onto the configured labels."""
    if len(scores) != len(class_labels):
        raise ModelServerError(
            f"model returned {len(scores)} scores for {len(class_labels)} classes"
        )
    preds = np.array(scores, dtype=np.float64)
    top_idx = int(preds.argmax())
    return {
        "predicted_class": class_labels[top_idx],
        "confidence": float(preds[top_idx]),
        "probabilities": {label: float(p) for label, p in zip(class_labels, preds)},
    }
