# FastAPI entry point for the question generation service
# app/main.py
from fastapi import FastAPI
from contextlib import asynccontextmanager

from app.endpoints import (
    generate_questions as generate_questions_router,
    questions as questions_router,
)
from app.services.question_generator import GeneratorConfig
from app.utils.config import settings
from app.utils.db import engine, init_models
from app.utils.errors import ConfigurationError
from app.utils.logger import logger

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manages application startup and shutdown events.
    """
    logger.info("Question Generation API starting up...")

    await init_models()

    # Requests keep answering 500 until the key is fixed, so only report it here.
    try:
        GeneratorConfig.from_settings(settings).validate_credentials()
        logger.info(f"OpenAI credentials present; generating with model '{settings.openai_model_name}'.")
    except ConfigurationError as e:
        logger.critical(f"Question generation unavailable: {e.message}")

    logger.info("Startup complete.")
    yield
    logger.info("Question Generation API shutting down...")
    await engine.dispose()

app = FastAPI(
    title="Question Generation API",
    description="Generates and stores quiz questions per subject and topic.",
    version="1.0.0",
    lifespan=lifespan
)

# CORS headers for the generation route are set by the route itself.
app.include_router(generate_questions_router.router, prefix="/generate-questions", tags=["Generation"])
app.include_router(questions_router.router, prefix="/questions", tags=["Questions"])

@app.get("/")
async def root():
    return {"message": "Welcome to the Question Generation API"}
