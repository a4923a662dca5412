# tests/test_question_pipeline.py
import asyncio
import pytest

from app.models.question import QuestionRequest
from app.services.question_generator import QuestionGenerator
from app.services.question_pipeline import QuestionPipeline
from app.utils.errors import UpstreamError

from conftest import llm_reply, make_questions


class InMemoryRepository:
    def __init__(self, rows=None):
        self.rows = list(rows or [])
        self.insert_calls = 0

    async def find_by_subject_topic(self, session, subject, topic, limit=None):
        matches = [r for r in self.rows if r["subject"] == subject and r["topic"] == topic]
        return matches[:limit] if limit else matches

    async def insert_many(self, session, records):
        self.insert_calls += 1
        self.rows.extend(records)
        return list(records)


def _stored(subject, topic, n):
    return [dict(item, subject=subject, topic=topic, created_by="seed") for item in make_questions(n, 0)]


@pytest.fixture
def build_pipeline(generator_config, mock_llm):
    def _build(rows=None):
        repository = InMemoryRepository(rows)
        return QuestionPipeline(QuestionGenerator(generator_config, llm=mock_llm), repository), repository
    return _build


@pytest.mark.generation
class TestQuestionPipeline:
    def test_enough_inventory_skips_provider(self, build_pipeline, mock_llm):
        existing = _stored("Math", "Algebra", 12)
        pipeline, repository = build_pipeline(existing + _stored("Math", "Geometry", 3))

        result = asyncio.run(pipeline.ensure_questions(None, QuestionRequest(subject="Math", topic="Algebra", count=10)))

        mock_llm.ainvoke.assert_not_awaited()
        assert result.questions == existing
        assert result.generated is False
        assert result.message == "Retrieved existing questions"
        assert repository.insert_calls == 0

    def test_short_inventory_returns_existing_plus_generated(self, build_pipeline, mock_llm):
        existing = _stored("Math", "Algebra", 3)
        pipeline, repository = build_pipeline(existing)

        result = asyncio.run(pipeline.ensure_questions(None, QuestionRequest(subject="Math", topic="Algebra", count=10)))

        mock_llm.ainvoke.assert_awaited_once()
        assert len(result.questions) == 13  # not trimmed to count
        assert result.questions[:3] == existing
        assert result.generated is True
        assert repository.insert_calls == 1

    def test_topic_match_is_case_sensitive(self, build_pipeline, mock_llm):
        pipeline, _ = build_pipeline(_stored("math", "algebra", 12))
        asyncio.run(pipeline.ensure_questions(None, QuestionRequest(subject="Math", topic="Algebra", count=10)))
        mock_llm.ainvoke.assert_awaited_once()

    def test_upstream_failure_inserts_nothing(self, build_pipeline, mock_llm):
        mock_llm.ainvoke.side_effect = UpstreamError("Failed to generate questions", details={"status": 500})
        pipeline, repository = build_pipeline()

        with pytest.raises(UpstreamError):
            asyncio.run(pipeline.ensure_questions(None, QuestionRequest(subject="Math", topic="Algebra")))
        assert repository.insert_calls == 0
        assert ("Math", "Algebra") not in pipeline.in_flight

    def test_concurrent_requests_generate_once(self, build_pipeline, mock_llm):
        async def slow_reply(*args, **kwargs):
            await asyncio.sleep(0.05)
            return llm_reply(make_questions(6, 4))

        mock_llm.ainvoke.side_effect = slow_reply
        pipeline, repository = build_pipeline()
        request = QuestionRequest(subject="History", topic="Rome", count=10)

        async def run_both():
            return await asyncio.gather(
                pipeline.ensure_questions(None, request),
                pipeline.ensure_questions(None, request),
            )

        first, second = asyncio.run(run_both())

        assert mock_llm.ainvoke.await_count == 1
        assert repository.insert_calls == 1
        assert len(repository.rows) == 10
        assert {first.generated, second.generated} == {True, False}
        assert len(first.questions) == len(second.questions) == 10
