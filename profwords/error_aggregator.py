"""Collects per-chunk, per-profession failures without aborting a batch."""

import logging
from typing import Sequence, Union

ChunkRef = Union[int, Sequence[str]]


def _describe(chunk) -> str:
    if chunk is None:
        return "unknown chunk"
    if isinstance(chunk, int):
        return f"chunk {chunk}"
    if isinstance(chunk, str):
        return f"words [{chunk}]"
    if isinstance(chunk, Sequence):
        return "words [" + ", ".join(str(t) for t in chunk) + "]"
    return f"chunk {chunk!r}"


class ErrorAggregator:
    """Accumulates human-readable failure descriptions in arrival order."""

    def __init__(self):
        self._messages: list[str] = []

    def record(self, profession_id: str, chunk: ChunkRef, message: str) -> None:
        """
        Record one failure.

        Args:
            profession_id: Profession whose generation failed
            chunk: Chunk index, or the terms of the chunk. Anything else is
                recorded by its repr.
            message: What went wrong
        """
        self._messages.append(f"Error processing {_describe(chunk)} for {profession_id}: {message}")

    def summarize(self) -> list[str]:
        """Return all recorded failures, oldest first."""
        return list(self._messages)

    def log_summary(self, logger: logging.Logger) -> None:
        """Log recorded failures at error level, if any."""
        if not self._messages:
            return
        logger.error(f"Some chunks failed ({len(self._messages)}):")
        for message in self._messages:
            logger.error(f"  {message}")

    def __len__(self) -> int:
        return len(self._messages)

    def __bool__(self) -> bool:
        return bool(self._messages)
