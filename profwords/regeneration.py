"""Single-word sentence regeneration with cancellation of superseded requests."""

import asyncio
from typing import Optional

import config
from profwords.chunk_scheduler import TextGenerator
from profwords.logger import get_logger
from profwords.models import EnrichmentResult, Profession, Word
from profwords.pipeline import enrich_words

logger = get_logger("profwords.regeneration")


class SentenceRegenerator:
    """
    Re-runs generation for one displayed word and one profession.

    Only the most recent regeneration may update a word. Starting a new one,
    or calling supersede() (e.g. when the chapter changes), cancels the
    request in flight and its result is dropped.
    """

    def __init__(self, client: TextGenerator, schema: str = config.RESPONSE_SCHEMA):
        self._client = client
        self._schema = schema
        self._task: Optional[asyncio.Task] = None
        self._generation = 0

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    def supersede(self) -> None:
        """Cancel the regeneration in flight, if any."""
        self._generation += 1
        if self.in_flight:
            self._task.cancel()
        self._task = None

    async def regenerate(self, word: Word, profession: Profession) -> Optional[str]:
        """
        Regenerate the sentence for `profession` on `word`.

        The word is updated in place only if this call was not superseded
        and the service produced a sentence.

        Args:
            word: The displayed word
            profession: Profession to regenerate

        Returns:
            The new sentence, or None if superseded or generation failed

        Raises:
            ValidationError: If the word or profession is unusable
        """
        self.supersede()
        token = self._generation
        task = asyncio.create_task(
            enrich_words([word], [profession], self._client, schema=self._schema)
        )
        self._task = task

        try:
            result: EnrichmentResult = await task
        except asyncio.CancelledError:
            if token != self._generation:
                logger.info(f"Regeneration of '{word.term}' for {profession.key} superseded")
                return None
            raise
        finally:
            if self._task is task:
                self._task = None

        if token != self._generation:
            logger.info(f"Discarding superseded result for '{word.term}'")
            return None

        regenerated = result.words[0]
        sentence = regenerated.sentences_by_profession.get(profession.key)
        if sentence is None:
            return None

        word.sentences_by_profession[profession.key] = sentence
        if self._schema == "words":
            word.translations = list(regenerated.translations)
        return sentence
