# app/utils/config.py
import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Load .env file before defining settings
load_dotenv()

class Settings(BaseSettings):
    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./questions.db")
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # --- LLM Provider Configuration ---
    # OpenAI specific
    openai_api_key: str | None = os.getenv("OPENAI_API_KEY")
    openai_model_name: str = os.getenv("OPENAI_MODEL_NAME", "gpt-3.5-turbo")
    openai_base_url: str | None = os.getenv("OPENAI_BASE_URL")
    openai_temperature: float = 0.7
    openai_max_tokens: int = 2000
    openai_request_timeout: float | None = None  # None keeps the HTTP client's default

    # Question generation
    default_grade: str = "High School"
    default_question_count: int = 10
    question_list_limit: int = 15
    generated_by_tag: str = "gpt"
    strict_question_validation: bool = True

settings = Settings()
