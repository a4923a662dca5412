# app/utils/logger.py
import logging
import sys
from app.utils.config import settings

logger = logging.getLogger("question_generation")
logger.setLevel(getattr(logging, settings.log_level, logging.INFO))

# uvicorn --reload re-imports this module; avoid stacking handlers.
if not logger.handlers:
    _handler = logging.StreamHandler(sys.stdout)
    _handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    logger.addHandler(_handler)

# Uvicorn configures the root logger too; keep our lines from printing twice.
logger.propagate = False
