# tests/conftest.py
import pytest
from fastapi.testclient import TestClient
import json
import os
import logging
from unittest.mock import AsyncMock

# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# --- Point the app at a throwaway database and a fake key before it is imported ---
TEST_DB_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "test_questions.db")
# Kept aside for the llm_integration tests, which talk to the real provider.
REAL_OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["OPENAI_API_KEY"] = "sk-test-key-for-pytest"

import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from langchain_core.messages import AIMessage
from sqlalchemy import create_engine, delete
from sqlalchemy.orm import Session

from app.utils.config import settings
from app.utils.db import Base
from app.models.game_question import GameQuestion
from app.services import question_pipeline
from app.services.question_generator import GeneratorConfig, QuestionGenerator

sync_engine = create_engine(f"sqlite:///{TEST_DB_PATH}")


def make_questions(mcq_count: int, tf_count: int, prefix: str = "Q") -> list:
    """Well-formed provider output with the requested mix of question types."""
    items = []
    for i in range(mcq_count):
        items.append({
            "question": f"{prefix} multiple choice {i}?",
            "options": [{"id": letter, "text": f"Option {letter}"} for letter in "ABCD"],
            "correct_answer": "ABCD"[i % 4],
            "type": "multiple_choice",
        })
    for i in range(tf_count):
        items.append({
            "question": f"{prefix} statement {i}.",
            "correct_answer": "True" if i % 2 == 0 else "False",
            "type": "true_false",
        })
    return items


def llm_reply(items, fenced: bool = False) -> AIMessage:
    text = json.dumps(items, indent=2)
    if fenced:
        text = f"```json\n{text}\n```"
    return AIMessage(content=text)


@pytest.fixture(scope="session", autouse=True)
def test_database():
    Base.metadata.create_all(sync_engine)
    yield
    sync_engine.dispose()
    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)
        logger.info(f"Removed test database: {TEST_DB_PATH}")


@pytest.fixture(scope="session")
def client(test_database):
    """
    Creates the TestClient once; startup runs the app's own table creation too.
    """
    from app.main import app
    logger.info("Creating TestClient instance for the session.")
    with TestClient(app) as c:
        yield c


# --- State Reset Fixture ---
@pytest.fixture(autouse=True)
def reset_question_table():
    with Session(sync_engine) as session:
        session.execute(delete(GameQuestion))
        session.commit()
    yield


@pytest.fixture
def seed_questions():
    """Inserts `n` stored questions directly into the test database."""
    def _seed(subject: str, topic: str, n: int, created_by: str = "seed"):
        with Session(sync_engine) as session:
            for i, item in enumerate(make_questions(n, 0, prefix=f"{subject}/{topic}")):
                session.add(GameQuestion(subject=subject, topic=topic, created_by=created_by, **item))
            session.commit()
    return _seed


@pytest.fixture
def count_rows():
    def _count(subject: str, topic: str) -> int:
        with Session(sync_engine) as session:
            return session.query(GameQuestion).filter_by(subject=subject, topic=topic).count()
    return _count


@pytest.fixture
def mock_llm():
    llm = AsyncMock()
    llm.ainvoke.return_value = llm_reply(make_questions(6, 4))
    return llm


@pytest.fixture
def generator_config():
    return GeneratorConfig.from_settings(settings)


@pytest.fixture
def mocked_pipeline(monkeypatch, mock_llm, generator_config):
    """Installs a pipeline whose generator talks to `mock_llm` instead of OpenAI."""
    pipeline = question_pipeline.QuestionPipeline(QuestionGenerator(generator_config, llm=mock_llm))
    monkeypatch.setattr(question_pipeline, "_pipeline", pipeline)
    return pipeline
