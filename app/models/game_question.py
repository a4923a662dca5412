# app/models/game_question.py
import uuid
from datetime import datetime

from sqlalchemy import Column, String, Text, DateTime, JSON

from app.utils.db import Base


class GameQuestion(Base):
    __tablename__ = "ai_game_questions"
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    subject = Column(String, nullable=False, index=True)
    topic = Column(String, nullable=False, index=True)
    question = Column(Text, nullable=False)
    options = Column(JSON, nullable=True)  # [{"id": "A", "text": ...}] for multiple_choice only
    correct_answer = Column(String, nullable=False)
    type = Column(String, nullable=False)
    created_by = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
