"""Chunking of word collections and concurrent dispatch of generation requests."""

import asyncio
from typing import Callable, Optional, Protocol, Sequence

from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

import config
from profwords.errors import GenerationFailed, InvalidRequest, UpstreamGenerationError
from profwords.logger import get_logger
from profwords.models import GenerationRequest, GenerationResult, Profession, Word
from profwords.prompt_builder import build_prompt

logger = get_logger("profwords.scheduler")


class TextGenerator(Protocol):
    """Anything that turns a prompt into raw completion text."""

    async def generate(self, prompt: str) -> str: ...


def chunk_words(words: Sequence[Word], size: int = config.CHUNK_SIZE) -> list[list[Word]]:
    """
    Split words into consecutive chunks of `size`.

    The last chunk may be shorter. Boundaries depend only on position.
    """
    if size < 1:
        raise ValueError(f"Chunk size must be positive, got {size}")
    return [list(words[i : i + size]) for i in range(0, len(words), size)]


def schedule(
    words: Sequence[Word],
    professions: Sequence[Profession],
    chunk_size: int = config.CHUNK_SIZE,
) -> list[GenerationRequest]:
    """
    Pair every chunk with every profession.

    Args:
        words: Word collection, in display order
        professions: Professions to generate for
        chunk_size: Words per chunk

    Returns:
        Requests ordered chunk-major, then by profession

    Raises:
        InvalidRequest: If words or professions is empty
    """
    if not words or not professions:
        raise InvalidRequest(
            "Invalid request: professions and words must be non-empty arrays"
        )

    return [
        GenerationRequest(chunk_index=index, words=chunk, profession=profession)
        for index, chunk in enumerate(chunk_words(words, chunk_size))
        for profession in professions
    ]


async def generate_with_retry(
    client: TextGenerator,
    prompt: str,
    max_attempts: int = config.GENERATION_MAX_ATTEMPTS,
) -> str:
    """Call the client, retrying GenerationFailed up to max_attempts in total."""
    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(max(1, max_attempts)),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(GenerationFailed),
        reraise=True,
    ):
        with attempt:
            return await client.generate(prompt)


async def run_request(
    request: GenerationRequest,
    client: TextGenerator,
    schema: str = config.RESPONSE_SCHEMA,
    max_attempts: int = config.GENERATION_MAX_ATTEMPTS,
) -> GenerationResult:
    """
    Run one generation request, turning service failures into a failed result.

    Args:
        request: Chunk and profession to generate for
        client: Generation client
        schema: Response schema the prompt asks for
        max_attempts: Total attempts per request

    Returns:
        GenerationResult holding either the raw completion or the error
    """
    prompt = build_prompt(request.words, request.profession, schema)
    try:
        raw = await generate_with_retry(client, prompt, max_attempts)
    except UpstreamGenerationError as e:
        logger.warning(
            f"  Chunk {request.chunk_index} failed for {request.profession.key}: {e}"
        )
        return GenerationResult(request=request, error=str(e))
    return GenerationResult(request=request, raw_response=raw)


async def dispatch(
    requests: Sequence[GenerationRequest],
    client: TextGenerator,
    schema: str = config.RESPONSE_SCHEMA,
    max_attempts: int = config.GENERATION_MAX_ATTEMPTS,
    progress: Optional[Callable[[GenerationResult], None]] = None,
) -> list[GenerationResult]:
    """
    Issue all requests concurrently and join on them.

    Args:
        requests: Independent generation requests
        client: Generation client shared by all requests
        schema: Response schema the prompts ask for
        max_attempts: Total attempts per request
        progress: Optional callback invoked as each request completes

    Returns:
        Results in the same order as `requests`

    Raises:
        Any error other than an upstream generation failure. The requests
        still running are cancelled before it propagates.
    """

    async def run_and_report(request: GenerationRequest) -> GenerationResult:
        result = await run_request(request, client, schema, max_attempts)
        if progress is not None:
            progress(result)
        return result

    tasks = [asyncio.ensure_future(run_and_report(r)) for r in requests]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
