# app/services/question_repository.py
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.game_question import GameQuestion
from app.utils.errors import StorageError
from app.utils.logger import logger


class QuestionRepository:
    """Reads and writes the ai_game_questions table. Rows are never updated or deleted here."""

    async def find_by_subject_topic(self, session: AsyncSession, subject: str, topic: str,
                                    limit: Optional[int] = None) -> List[GameQuestion]:
        query = select(GameQuestion).filter_by(subject=subject, topic=topic).order_by(GameQuestion.created_at)
        if limit is not None:
            query = query.limit(limit)
        try:
            result = await session.execute(query)
        except SQLAlchemyError as e:
            logger.error(f"Error querying existing questions for {subject}/{topic}: {e}")
            raise StorageError("Database query failed", details=str(e), status_code=400)
        return list(result.scalars().all())

    async def insert_many(self, session: AsyncSession, records: List[Dict[str, Any]]) -> List[GameQuestion]:
        """Inserts all records in a single transaction; nothing is kept if any row is rejected."""
        if not records:
            return []
        rows = [GameQuestion(**record) for record in records]
        session.add_all(rows)
        try:
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Error inserting {len(rows)} questions: {e}")
            raise StorageError("Failed to save generated questions", details=str(e), status_code=500)
        logger.info(f"Successfully inserted {len(rows)} questions")
        return rows


question_repository = QuestionRepository()
