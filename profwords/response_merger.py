"""Parsing of model responses and merging of sentences onto words."""

import json
import re
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

import config
from profwords.error_aggregator import ErrorAggregator
from profwords.errors import (
    EmptyResponse,
    InvalidWords,
    MalformedResponse,
    MalformedResponseError,
    ValidationError,
)
from profwords.logger import get_logger
from profwords.models import GeneratedSentence, GenerationResult, Profession, Translation, Word
from profwords.prompt_builder import validate_profession

logger = get_logger("profwords.merger")

_FENCED_JSON = re.compile(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```")
_BARE_JSON = re.compile(r"\{[\s\S]*\}")


def extract_json_from_response(content: str) -> dict:
    """
    Extract a JSON object from a completion.

    JSON mode normally yields a bare object, but some compatible services
    still wrap it in a Markdown code block.

    Args:
        content: Raw completion text

    Returns:
        Parsed JSON object

    Raises:
        MalformedResponse: If no JSON object can be found
    """
    try:
        parsed = json.loads(content)
    except (json.JSONDecodeError, TypeError):
        parsed = None
        for pattern, group in ((_FENCED_JSON, 1), (_BARE_JSON, 0)):
            match = pattern.search(content or "")
            if not match:
                continue
            try:
                parsed = json.loads(match.group(group))
                break
            except json.JSONDecodeError:
                pass

    if not isinstance(parsed, dict):
        raise MalformedResponse(
            f"Could not extract JSON object from response: {str(content)[:200]}..."
        )
    return parsed


def _sentence_text(value) -> Optional[str]:
    if isinstance(value, str):
        return value
    if isinstance(value, dict) and isinstance(value.get("en"), str):
        return value["en"]
    if isinstance(value, list):
        return next((v for v in value if isinstance(v, str) and v), None)
    return None


def _parse_translations(value) -> Optional[list[Translation]]:
    if not isinstance(value, list) or not value:
        return None
    try:
        return [Translation.model_validate(item) for item in value]
    except PydanticValidationError:
        logger.warning(f"  Ignoring malformed translations: {str(value)[:200]}")
        return None


def _parse_data_schema(payload: dict) -> dict[str, GeneratedSentence]:
    items = payload.get("data")
    if not isinstance(items, list):
        raise MalformedResponse("Invalid AI response format: data array is missing")

    entries: dict[str, GeneratedSentence] = {}
    for item in items:
        if not isinstance(item, dict) or not isinstance(item.get("word"), str):
            continue
        sentence = _sentence_text(item.get("sentences"))
        # First entry for a term wins
        if sentence and item["word"] not in entries:
            entries[item["word"]] = GeneratedSentence(sentence=sentence)
    return entries


def _parse_words_schema(payload: dict) -> dict[str, GeneratedSentence]:
    items = payload.get("words")
    if not isinstance(items, dict):
        raise MalformedResponse("Invalid AI response format: words map is missing")

    entries: dict[str, GeneratedSentence] = {}
    for term, item in items.items():
        if not isinstance(item, dict):
            continue
        sentence = _sentence_text(item.get("sentence"))
        if sentence:
            entries[term] = GeneratedSentence(
                sentence=sentence,
                translations=_parse_translations(item.get("translations")),
            )
    return entries


def parse_response(raw_response: str, schema: str = config.RESPONSE_SCHEMA) -> dict[str, GeneratedSentence]:
    """
    Parse a completion into generated sentences keyed by term.

    Args:
        raw_response: Raw completion text
        schema: "data" for {"data": [{word, sentences}]},
            "words" for {"words": {term: {translations, sentence}}}

    Returns:
        Mapping of term to GeneratedSentence

    Raises:
        MalformedResponse: If the text is not JSON or lacks the schema's key
    """
    payload = extract_json_from_response(raw_response)
    if schema == "data":
        return _parse_data_schema(payload)
    if schema == "words":
        return _parse_words_schema(payload)
    raise ValueError(f"Unknown response schema: {schema}")


def merge(
    words: list[Word],
    raw_response: str,
    profession: Profession,
    schema: str = config.RESPONSE_SCHEMA,
) -> int:
    """
    Write a profession's generated sentences onto matching words in place.

    Words are matched by exact term. Words the model left out are skipped.
    Under the "words" schema the word's translations are replaced wholesale.

    Args:
        words: Word entries to update
        raw_response: Raw completion text
        profession: Profession the sentences were generated for
        schema: Response schema the completion follows

    Returns:
        Number of words that received a sentence

    Raises:
        InvalidWords: If words is not a list
        InvalidProfession: If profession is missing or has no id
        EmptyResponse: If raw_response is empty
        MalformedResponse: If raw_response cannot be parsed
    """
    if not isinstance(words, list):
        raise InvalidWords("Invalid words: must be a list")
    profession = validate_profession(profession)
    if not raw_response:
        raise EmptyResponse("Invalid response: response text is required")

    entries = parse_response(raw_response, schema)

    merged = 0
    for word in words:
        if word is None or not word.term:
            logger.warning(f"  Invalid word object: {word!r}")
            continue
        entry = entries.get(word.term)
        if entry is None:
            continue
        word.sentences_by_profession[profession.key] = entry.sentence
        if entry.translations:
            word.translations = list(entry.translations)
        merged += 1
    return merged


def merge_result(
    result: GenerationResult,
    aggregator: ErrorAggregator,
    schema: str = config.RESPONSE_SCHEMA,
) -> int:
    """
    Merge one generation result, recording any failure instead of raising.

    Args:
        result: Outcome of a generation request
        aggregator: Collector for failures
        schema: Response schema the completion follows

    Returns:
        Number of words that received a sentence
    """
    request = result.request
    if not result.ok:
        aggregator.record(request.profession.key, request.chunk_index, result.error)
        return 0

    try:
        merged = merge(request.words, result.raw_response, request.profession, schema)
    except (ValidationError, MalformedResponseError) as e:
        logger.error(
            f"  Error merging chunk {request.chunk_index} for {request.profession.key}: {e}"
        )
        aggregator.record(request.profession.key, request.chunk_index, str(e))
        return 0

    if merged < len(request.words):
        logger.info(
            f"  Chunk {request.chunk_index} for {request.profession.key}: "
            f"{len(request.words) - merged} word(s) missing from response"
        )
    return merged
