# Talks to the LLM provider: builds the generation prompt, calls the chat model
# and turns its raw text into question records ready for insertion.
# app/services/question_generator.py
import json
from typing import Any, Dict, List, Optional, Tuple

import openai
from langchain_openai import ChatOpenAI
from pydantic import BaseModel, ConfigDict, ValidationError

from app.models.enums import QuestionType
from app.models.question import GeneratedQuestion
from app.services.prompt_library import QUESTION_GENERATION_PROMPT
from app.utils.config import Settings
from app.utils.errors import ConfigurationError, ParseError, UpstreamError
from app.utils.logger import logger
from app.utils.text import strip_code_fences

OPENAI_KEY_PREFIX = "sk-"


class GeneratorConfig(BaseModel):
    """Everything the generator needs from the environment, passed in explicitly."""
    model_config = ConfigDict(protected_namespaces=())

    openai_api_key: Optional[str] = None
    model_name: str = "gpt-3.5-turbo"
    base_url: Optional[str] = None
    temperature: float = 0.7
    max_tokens: int = 2000
    request_timeout: Optional[float] = None
    created_by: str = "gpt"
    strict_validation: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeneratorConfig":
        return cls(
            openai_api_key=settings.openai_api_key,
            model_name=settings.openai_model_name,
            base_url=settings.openai_base_url,
            temperature=settings.openai_temperature,
            max_tokens=settings.openai_max_tokens,
            request_timeout=settings.openai_request_timeout,
            created_by=settings.generated_by_tag,
            strict_validation=settings.strict_question_validation,
        )

    def validate_credentials(self) -> None:
        if not self.openai_api_key:
            raise ConfigurationError("OpenAI API key not configured")
        if not self.openai_api_key.startswith(OPENAI_KEY_PREFIX):
            raise ConfigurationError("Invalid OpenAI API key format")


def compute_generation_split(count: int) -> Tuple[int, int]:
    """Returns (multiple_choice, true_false) counts for a 60/40 target ratio."""
    mcq_count = -(-count * 6 // 10)  # ceil(count * 0.6)
    tf_count = count * 4 // 10       # floor(count * 0.4)
    return mcq_count, tf_count


def parse_generated_questions(raw_text: str) -> List[Any]:
    """Decodes the model output into a list, tolerating Markdown code fences."""
    cleaned = strip_code_fences(raw_text)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"JSON parse error on model output: {e}. Content starts with: {cleaned[:100]!r}")
        raise ParseError("Failed to parse generated questions", raw_response=raw_text,
                         details=f"Failed to parse JSON: {e}")
    if not isinstance(parsed, list):
        raise ParseError("Failed to parse generated questions", raw_response=raw_text,
                         details="Response is not an array")
    return parsed


class QuestionGenerator:
    def __init__(self, config: GeneratorConfig, llm=None):
        config.validate_credentials()
        self.config = config
        self.llm = llm if llm is not None else ChatOpenAI(
            openai_api_key=config.openai_api_key,
            model_name=config.model_name,
            base_url=config.base_url,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            timeout=config.request_timeout,
            max_retries=0,
        )
        logger.info(f"QuestionGenerator initialized with model '{config.model_name}'.")

    async def request_completion(self, subject: str, topic: str, grade: str,
                                 mcq_count: int, tf_count: int) -> str:
        """Calls the provider once and returns the raw completion text."""
        messages = QUESTION_GENERATION_PROMPT.format_messages(
            subject=subject, topic=topic, grade=grade,
            mcq_count=mcq_count, tf_count=tf_count,
        )
        logger.info(f"Calling OpenAI for {mcq_count} MCQ + {tf_count} true/false questions on {subject}/{topic}...")
        try:
            response = await self.llm.ainvoke(messages)
        except openai.APIStatusError as e:
            body = e.body if e.body is not None else {"status": e.status_code, "statusText": e.response.reason_phrase}
            logger.error(f"OpenAI API error (status {e.status_code}): {body}")
            raise UpstreamError("Failed to generate questions",
                                details={"status": e.status_code, "body": body})
        except openai.APIConnectionError as e:
            logger.error(f"Failed to call OpenAI API: {e}")
            raise UpstreamError("Failed to connect to OpenAI API", details=str(e))

        content = response.content if isinstance(response.content, str) else ""
        logger.info(f"OpenAI response content length: {len(content)}")
        logger.debug(f"OpenAI response sample: {content[:100]}...")
        if not content:
            raise ParseError("Failed to parse generated questions", raw_response=content,
                             details="Empty completion")
        return content

    def build_records(self, items: List[Any], subject: str, topic: str) -> List[Dict[str, Any]]:
        """Maps parsed elements to insertable rows tagged with the generation source."""
        if not self.config.strict_validation:
            return [self._passthrough_record(item, subject, topic) for item in items]

        records = []
        for index, item in enumerate(items):
            try:
                question = GeneratedQuestion.model_validate(item)
            except ValidationError as e:
                logger.warning(f"Dropping malformed generated question #{index} for {subject}/{topic}: {e.errors()}")
                continue
            records.append({
                "subject": subject,
                "topic": topic,
                "question": question.question,
                "options": [option.model_dump() for option in question.options] if question.options else None,
                "correct_answer": question.correct_answer,
                "type": question.type.value,
                "created_by": self.config.created_by,
            })
        return records

    def _passthrough_record(self, item: Any, subject: str, topic: str) -> Dict[str, Any]:
        item = item if isinstance(item, dict) else {}
        return {
            "subject": subject,
            "topic": topic,
            "question": item.get("question"),
            "options": item.get("options") if item.get("type") == QuestionType.MULTIPLE_CHOICE.value else None,
            "correct_answer": item.get("correct_answer"),
            "type": item.get("type"),
            "created_by": self.config.created_by,
        }

    async def generate(self, subject: str, topic: str, grade: str, count: int) -> List[Dict[str, Any]]:
        mcq_count, tf_count = compute_generation_split(count)
        raw_text = await self.request_completion(subject, topic, grade, mcq_count, tf_count)
        items = parse_generated_questions(raw_text)
        logger.info(f"Successfully parsed {len(items)} questions from OpenAI")

        records = self.build_records(items, subject, topic)
        if items and not records:
            raise ParseError("Failed to parse generated questions", raw_response=raw_text,
                             details="No generated question passed validation")
        return records
