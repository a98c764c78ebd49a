"""Word enrichment pipeline: validate, chunk, generate, merge."""

from typing import Callable, Optional, Sequence

import config
from profwords.chunk_scheduler import TextGenerator, dispatch, schedule
from profwords.error_aggregator import ErrorAggregator
from profwords.errors import InvalidRequest
from profwords.logger import get_logger
from profwords.models import EnrichmentResult, GenerationResult, Profession, Word
from profwords.prompt_builder import extract_terms, validate_profession
from profwords.response_merger import merge_result

logger = get_logger("profwords.pipeline")


def validate_request(words: Sequence[Word], professions: Sequence[Profession]) -> None:
    """
    Check a request before any generation call is made.

    Raises:
        InvalidRequest: If words or professions is empty
        InvalidProfession: If a profession has no id
        InvalidWord / EmptyWordSet: If a word has no term
    """
    if not words or not professions:
        raise InvalidRequest(
            "Invalid request: professions and words must be non-empty arrays"
        )
    for profession in professions:
        validate_profession(profession)
    extract_terms(words)


async def enrich_words(
    words: Sequence[Word],
    professions: Sequence[Profession],
    client: TextGenerator,
    *,
    schema: str = config.RESPONSE_SCHEMA,
    chunk_size: int = config.CHUNK_SIZE,
    max_attempts: int = config.GENERATION_MAX_ATTEMPTS,
    progress: Optional[Callable[[GenerationResult], None]] = None,
) -> EnrichmentResult:
    """
    Generate profession sentences for every word, tolerating partial failure.

    Args:
        words: Words to enrich, in display order
        professions: Professions to generate sentences for
        client: Generation client, injected by the caller
        schema: Response schema to request and merge
        chunk_size: Words per generation request
        max_attempts: Total attempts per generation request
        progress: Optional callback invoked as each request completes

    Returns:
        EnrichmentResult with fresh word copies and any recorded failures

    Raises:
        ValidationError: If the input is rejected. Nothing is generated.
    """
    validate_request(words, professions)

    # Sentence maps start empty; the collection never changes size after this
    response_words = [word.fresh_copy() for word in words]
    requests = schedule(response_words, professions, chunk_size)
    logger.info(
        f"Generating sentences for {len(response_words)} words x "
        f"{len(professions)} professions ({len(requests)} requests)"
    )

    results = await dispatch(requests, client, schema, max_attempts, progress)

    aggregator = ErrorAggregator()
    merged = 0
    for result in results:
        merged += merge_result(result, aggregator, schema)

    aggregator.log_summary(logger)
    logger.info(
        f"Merged {merged} sentences, {len(aggregator)}/{len(requests)} requests failed"
    )
    return EnrichmentResult(words=response_words, errors=aggregator.summarize())
