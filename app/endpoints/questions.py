# Endpoint for reading stored questions back for a subject/topic

# app/endpoints/questions.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.question import StoredQuestion
from app.services.question_repository import question_repository
from app.utils.config import settings
from app.utils.db import get_db
from app.utils.errors import StorageError

router = APIRouter()

@router.get("/", response_model=List[StoredQuestion])
async def list_questions(
    subject: str,
    topic: str,
    limit: int = Query(default=settings.question_list_limit, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await question_repository.find_by_subject_topic(db, subject, topic, limit=limit)
    except StorageError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
