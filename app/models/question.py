# Data models for question generation requests and generated/stored questions
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.models.enums import QuestionType
from app.utils.config import settings


class QuestionRequest(BaseModel):
    subject: Optional[str] = None
    topic: Optional[str] = None
    grade: str = Field(default_factory=lambda: settings.default_grade)
    count: int = Field(default_factory=lambda: settings.default_question_count, ge=1)

    @model_validator(mode="before")
    @classmethod
    def drop_null_defaults(cls, data):
        # An explicit null for grade/count means "use the default"
        if isinstance(data, dict):
            return {key: value for key, value in data.items()
                    if not (key in ("grade", "count") and value is None)}
        return data


class QuestionOption(BaseModel):
    id: str = Field(pattern=r"^[A-Za-z]$")
    text: str


class GeneratedQuestion(BaseModel):
    """One question as the provider is asked to return it."""
    question: str = Field(min_length=1)
    type: QuestionType
    options: Optional[List[QuestionOption]] = None
    correct_answer: str

    @field_validator("correct_answer", mode="before")
    @classmethod
    def normalize_true_false(cls, value):
        if isinstance(value, bool):
            return "True" if value else "False"
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().capitalize()
        return value

    @model_validator(mode="after")
    def check_answer_shape(self):
        if self.type == QuestionType.MULTIPLE_CHOICE:
            if not self.options or len(self.options) != 4:
                raise ValueError("multiple_choice questions need exactly 4 options")
            option_ids = [option.id for option in self.options]
            if len(set(option_ids)) != len(option_ids):
                raise ValueError("option ids must be distinct")
            if self.correct_answer not in option_ids:
                raise ValueError(f"correct_answer '{self.correct_answer}' is not one of {option_ids}")
        else:
            if self.correct_answer not in ("True", "False"):
                raise ValueError("true_false answers must be 'True' or 'False'")
            self.options = None
        return self


class StoredQuestion(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    subject: str
    topic: str
    question: str
    type: str
    options: Optional[Any] = None
    correct_answer: str
    created_by: str
    created_at: Optional[datetime] = None
