# Endpoint that tops up the question inventory for a subject/topic via the LLM provider
# app/endpoints/generate_questions.py
import json

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.question import QuestionRequest, StoredQuestion
from app.services import question_pipeline
from app.utils.db import get_db
from app.utils.errors import QuestionGenerationError, RequestValidationError
from app.utils.logger import logger

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
}


def _json_response(content: dict, status_code: int) -> JSONResponse:
    return JSONResponse(content=content, status_code=status_code, headers=CORS_HEADERS)


async def _read_question_request(request: Request) -> QuestionRequest:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.error(f"Failed to parse request body: {e}")
        raise RequestValidationError("Invalid request body")
    if not isinstance(body, dict):
        raise RequestValidationError("Invalid request body")

    try:
        question_request = QuestionRequest.model_validate(body)
    except ValidationError as e:
        raise RequestValidationError("Invalid request body", details=json.loads(e.json(include_url=False)))

    logger.info(f"Request parameters: subject={question_request.subject!r}, topic={question_request.topic!r}, "
                f"grade={question_request.grade!r}, count={question_request.count}")
    if not question_request.subject or not question_request.topic:
        logger.error(f"Missing required parameters: subject={question_request.subject!r}, topic={question_request.topic!r}")
        raise RequestValidationError("Subject and topic are required")
    return question_request


@router.options("/")
@router.options("", include_in_schema=False)
async def generate_questions_preflight():
    return Response(status_code=204, headers=CORS_HEADERS)


@router.post("/")
@router.post("", include_in_schema=False)
async def generate_questions(request: Request, db: AsyncSession = Depends(get_db)):
    logger.info("Generate questions endpoint called")
    try:
        pipeline = question_pipeline.get_question_pipeline()
        question_request = await _read_question_request(request)
        result = await pipeline.ensure_questions(db, question_request)
    except QuestionGenerationError as e:
        logger.error(f"Question generation failed ({type(e).__name__}, {e.status_code}): {e.message} - {e.details}")
        return _json_response(e.to_dict(), e.status_code)
    except Exception as e:
        logger.exception(f"Unexpected error in generate questions endpoint: {e}")
        return _json_response({"error": "An unexpected error occurred", "details": str(e)}, 500)

    questions = [StoredQuestion.model_validate(q).model_dump(mode="json") for q in result.questions]
    return _json_response({"success": True, "message": result.message, "questions": questions}, 200)
