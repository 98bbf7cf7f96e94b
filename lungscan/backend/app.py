from fastapi import FastAPI, File, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from lungscan.backend import inference
from lungscan.config import load_backend_config
from lungscan.errors import InvalidImageError, ModelServerError
from lungscan.logging import get_logger, init_logging

logger = get_logger(__name__)


def create_app(config=None):
    """Build the prediction service for the given settings."""
    if config is None:
        config = load_backend_config()
    init_logging(config['log_level'])

    app = FastAPI(
        title="Lung CT Scan Prediction API",
        description="Classifies lung CT scan images through a TensorFlow Serving model",
    )
    app.state.config = config

    # Allow CORS from frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config['cors_origins'],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health_check():
        return {"status": "ok", "model_url": config['model_url']}

    @app.post("/predict/")
    async def predict(file: UploadFile = File(...)):
        """Classify one uploaded CT scan image."""
        try:
            contents = await file.read()
            if not contents:
                return JSONResponse(status_code=400, content={"error": "Empty file received"})

            content_type = file.content_type or ""
            if not content_type.lower().startswith("image/"):
                return JSONResponse(
                    status_code=415,
                    content={"error": f"Unsupported media type: {content_type or 'unknown'}"}
                )

            logger.info("Predict request file=%s size=%d", file.filename, len(contents))
            img_arr = inference.preprocess_image(contents, config['img_size'])
            scores = inference.request_scores(img_arr, config['model_url'], config['model_timeout'])
            result = inference.classify(scores, config['class_labels'])
            logger.info("Predicted %s for %s", result["predicted_class"], file.filename)
            return result

        except InvalidImageError as e:
            return JSONResponse(status_code=400, content={"error": str(e)})
        except ModelServerError as e:
            logger.warning("Model server failure: %s", e)
            return JSONResponse(status_code=502, content={"error": str(e)})
        except Exception as e:
            logger.exception("Unexpected error while predicting %s", file.filename)
            return JSONResponse(
                status_code=500,
                content={"error": f"Unexpected error: {e}"}
            )

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
