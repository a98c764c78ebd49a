"""Static exam dictionary loading and chapter paging."""

import json
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

import config
from profwords.errors import DictionaryNotFound, DictionaryReadError, UnknownExamType
from profwords.logger import get_logger
from profwords.models import DictionaryEntry, Word

logger = get_logger("profwords.dictionary")


def load_dictionary(exam_type: Optional[str]) -> list[DictionaryEntry]:
    """
    Load the word list for an exam type.

    Args:
        exam_type: One of config.EXAM_TYPES

    Returns:
        Dictionary entries in file order

    Raises:
        UnknownExamType: If exam_type is missing or unsupported
        DictionaryNotFound: If the dictionary file does not exist
        DictionaryReadError: If the file cannot be read or parsed
    """
    if not exam_type or exam_type not in config.EXAM_TYPES:
        raise UnknownExamType(
            f"Invalid exam type. Must be {' or '.join(config.EXAM_TYPES)}"
        )

    path = config.get_dictionary_path(exam_type)
    if not path.exists():
        raise DictionaryNotFound(f"Dictionary for {exam_type} not found")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise DictionaryReadError(f"Failed to read dictionary {path.name}: {e}") from e

    if not isinstance(data, list):
        raise DictionaryReadError(f"Unexpected dictionary format in {path.name}")

    try:
        entries = [DictionaryEntry.model_validate(item) for item in data]
    except PydanticValidationError as e:
        raise DictionaryReadError(f"Invalid entry in {path.name}: {e}") from e

    logger.debug(f"Loaded {len(entries)} entries from {path}")
    return entries


def chapter_count(entries: list[DictionaryEntry], page_size: int = config.CHAPTER_SIZE) -> int:
    """Number of chapters a dictionary splits into."""
    return -(-len(entries) // page_size)


def get_words_from_chapter(
    entries: list[DictionaryEntry],
    chapter: int,
    page_size: int = config.CHAPTER_SIZE,
) -> list[Word]:
    """
    Convert one chapter of dictionary entries into words.

    Args:
        entries: Full dictionary
        chapter: 1-based chapter number
        page_size: Words per chapter

    Returns:
        Words of the chapter with empty sentence maps
    """
    if chapter < 1:
        raise ValueError(f"Chapter must be >= 1, got {chapter}")
    start = (chapter - 1) * page_size
    return [
        Word(
            term=entry.name,
            translations=entry.word_translations(),
            us_phonetic=entry.usphone,
            uk_phonetic=entry.ukphone,
        )
        for entry in entries[start : start + page_size]
    ]
