# app/services/question_pipeline.py
import asyncio
import threading
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.question import QuestionRequest
from app.services.question_generator import GeneratorConfig, QuestionGenerator
from app.services.question_repository import QuestionRepository, question_repository
from app.utils.config import settings
from app.utils.logger import logger


@dataclass
class PipelineResult:
    questions: List = field(default_factory=list)
    generated: bool = False

    @property
    def message(self) -> str:
        return "Generated and saved new questions" if self.generated else "Retrieved existing questions"


class KeyedLocks:
    """One asyncio.Lock per key, discarded once nobody holds or waits on it."""

    def __init__(self):
        self._locks: Dict[Tuple[str, str], asyncio.Lock] = {}
        self._users: Dict[Tuple[str, str], int] = {}

    @asynccontextmanager
    async def hold(self, key: Tuple[str, str]):
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]

    def __contains__(self, key) -> bool:
        return key in self._locks


class QuestionPipeline:
    def __init__(self, generator: QuestionGenerator, repository: Optional[QuestionRepository] = None):
        self.generator = generator
        self.repository = repository or question_repository
        self.in_flight = KeyedLocks()

    async def ensure_questions(self, session: AsyncSession, request: QuestionRequest) -> PipelineResult:
        """
        Returns at least `request.count` questions for the subject/topic when the provider
        delivers enough, generating and storing new ones only if the inventory is short.
        Concurrent calls for the same subject/topic generate one at a time; later callers
        re-check the inventory once the earlier generation has been stored.
        """
        subject, topic = request.subject, request.topic
        logger.info(f"Checking for existing questions for {subject}/{topic}...")
        existing = await self.repository.find_by_subject_topic(session, subject, topic)
        if len(existing) >= request.count:
            logger.info(f"Found {len(existing)} existing questions, returning them")
            return PipelineResult(questions=existing)

        async with self.in_flight.hold((subject, topic)):
            existing = await self.repository.find_by_subject_topic(session, subject, topic)
            if len(existing) >= request.count:
                logger.info(f"Inventory for {subject}/{topic} was filled by a concurrent request ({len(existing)} questions)")
                return PipelineResult(questions=existing)

            logger.info(f"Need to generate {request.count - len(existing)} new questions for {subject}/{topic}")
            records = await self.generator.generate(subject, topic, request.grade, request.count)
            logger.info(f"Inserting {len(records)} questions into database...")
            inserted = await self.repository.insert_many(session, records)

        return PipelineResult(questions=existing + inserted, generated=True)


_pipeline: Optional[QuestionPipeline] = None
_pipeline_lock = threading.Lock()


def get_question_pipeline() -> QuestionPipeline:
    """
    Builds the process-wide pipeline on first use. Raises ConfigurationError while the
    provider credentials are missing or malformed, so every request reports it.
    """
    global _pipeline
    with _pipeline_lock:
        if _pipeline is None:
            config = GeneratorConfig.from_settings(settings)
            _pipeline = QuestionPipeline(QuestionGenerator(config))
        return _pipeline
