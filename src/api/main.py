import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException

from src.api.schemas import ClassificationRequest, ClassificationResponse
from src.core.config import (
    build_request_config,
    get_classifier_section,
    load_config,
    load_settings,
)
from src.core.errors import (
    ClassifierError,
    ConfigError,
    ParseError,
    ProviderError,
    TransportError,
)
from src.core.service import ClassifierService, describe_changes
from src.core.utils import build_ticket_content, clean_message_body

# Configure logger
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("API")

app_state = {}

# Typed client failures -> HTTP status returned to the caller
ERROR_STATUS = {
    ConfigError: 500,
    TransportError: 504,
    ProviderError: 502,
    ParseError: 502,
}


def init_service(config_path: str = "config.yaml") -> ClassifierService:
    """Builds the service from YAML settings and the API key in the environment."""
    section = get_classifier_section(load_config(config_path))
    return ClassifierService(build_request_config(section), load_settings(section))


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting AI Ticket Classifier API...")
    load_dotenv()

    try:
        app_state["service"] = init_service()
        config = app_state["service"].config
        logger.info(f"Classifier ready: provider={config.provider.value}, model={config.model}")
    except (ClassifierError, FileNotFoundError) as e:
        logger.critical(f"Classifier not configured: {e}")
        app_state["service"] = None

    yield
    logger.info("Shutting down AI Ticket Classifier API...")


app = FastAPI(title="AI Ticket Classifier API", lifespan=lifespan)


@app.get("/health")
def health_check():
    service = app_state.get("service")
    return {
        "status": "ok",
        "configured": service is not None,
        "provider": service.config.provider.value if service else None,
        "model": service.config.model if service else None,
    }


@app.post("/classify", response_model=ClassificationResponse)
def classify_ticket(request: ClassificationRequest):
    """
    Manual classification: runs one AI call inline and returns the validated result.
    Failures are reported to the caller with a status matching their type.
    """
    service: ClassifierService = app_state.get("service")
    if not service:
        raise HTTPException(status_code=503, detail="Plugin not configured")

    content = (request.content or "").strip() or build_ticket_content(
        request.subject, clean_message_body(request.message)
    )
    schema = request.classification_schema

    try:
        result = service.run(content, schema)
    except ClassifierError as e:
        service.handle_error(e)
        status = next(
            (code for error_type, code in ERROR_STATUS.items() if isinstance(e, error_type)),
            500,
        )
        raise HTTPException(status_code=status, detail=str(e)) from e

    return ClassificationResponse(result=result, changes=describe_changes(result, schema))
