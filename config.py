"""Configuration settings for the ProfWords sentence generation service."""

import os
from datetime import datetime
from pathlib import Path

# Base paths
PROJECT_ROOT = Path(__file__).parent
DICTS_DIR = Path(os.getenv("PROFWORDS_DICTS_DIR", PROJECT_ROOT / "dicts"))
OUTPUT_DIR = PROJECT_ROOT / "output"
PROMPTS_DIR = PROJECT_ROOT / "prompts"
LOGS_DIR = PROJECT_ROOT / "logs"

# Logging
LOG_LEVEL = os.getenv("PROFWORDS_LOG_LEVEL", "INFO")


def get_output_path(
    exam_type: str, chapter: int, timestamp: datetime | None = None
) -> Path:
    """Generate output path with datetime suffix.

    Args:
        exam_type: Dictionary the words were taken from, e.g. CET4
        chapter: 1-based chapter number
        timestamp: Datetime to use for suffix. If None, uses current time.

    Returns:
        Path like output/CET4/chapter_003_20260131_143022.json
    """
    if timestamp is None:
        timestamp = datetime.now()
    suffix = timestamp.strftime("%Y%m%d_%H%M%S")
    return OUTPUT_DIR / exam_type / f"chapter_{chapter:03d}_{suffix}.json"


def get_dictionary_path(exam_type: str) -> Path:
    """Path of the static word list for an exam type."""
    return DICTS_DIR / f"{exam_type}_T.json"


# Dictionaries
EXAM_TYPES = ("CET4", "CET6")
CHAPTER_SIZE = 20  # words per chapter

# Prompt templates, one per response schema
PROMPT_TEMPLATES = {
    "data": PROMPTS_DIR / "sentences_data.txt",
    "words": PROMPTS_DIR / "sentences_words.txt",
}


def check_response_schema(schema: str) -> str:
    """Return schema if a prompt template exists for it, else raise ValueError."""
    if schema not in PROMPT_TEMPLATES:
        raise ValueError(
            f"Unknown response schema {schema!r}, expected one of: {', '.join(PROMPT_TEMPLATES)}"
        )
    return schema


# Response schema the prompt asks for and the merger expects ("data" or "words")
RESPONSE_SCHEMA = check_response_schema(os.getenv("PROFWORDS_RESPONSE_SCHEMA", "data"))

# OpenAI-compatible chat completion settings (read once at import)
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "o3-mini")
OPENAI_TEMPERATURE = 0.7
GENERATION_TIMEOUT = 60  # seconds

# Retry policy applied by the scheduler; 1 means a single attempt
GENERATION_MAX_ATTEMPTS = int(os.getenv("PROFWORDS_MAX_ATTEMPTS", "1"))

# Processing settings
CHUNK_SIZE = 5
DRY_RUN_LIMIT = 5

# HTTP server
SERVER_HOST = os.getenv("PROFWORDS_HOST", "127.0.0.1")
SERVER_PORT = int(os.getenv("PROFWORDS_PORT", "8000"))
CORS_ORIGINS = ["*"]
