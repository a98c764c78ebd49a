"""OpenAI-compatible chat completion wrapper for sentence generation."""

import asyncio
from typing import Optional

import openai
from openai import AsyncOpenAI

import config
from profwords.errors import EmptyCompletion, GenerationFailed, GenerationTimeout
from profwords.logger import get_logger

logger = get_logger("profwords.generation")


class GenerationClient:
    """Issues one structured-output chat completion per prompt."""

    def __init__(
        self,
        client: Optional[AsyncOpenAI] = None,
        model: str = config.OPENAI_MODEL,
        temperature: float = config.OPENAI_TEMPERATURE,
        timeout: float = config.GENERATION_TIMEOUT,
    ):
        """
        Initialize the generation client.

        Args:
            client: Configured AsyncOpenAI instance. If None, one is built from
                config on the first generate call.
            model: Chat model name
            temperature: Sampling temperature
            timeout: Seconds to wait for a single completion
        """
        self._client = client
        self.model = model
        self.temperature = temperature
        self.timeout = timeout

    @classmethod
    def from_config(cls) -> "GenerationClient":
        """Client using the API key and base URL in config, connected on first use."""
        return cls()

    def _openai(self) -> AsyncOpenAI:
        # Raises openai.OpenAIError when no API key is configured
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=config.OPENAI_API_KEY,
                base_url=config.OPENAI_BASE_URL,
                max_retries=0,
            )
        return self._client

    async def generate(self, prompt: str) -> str:
        """
        Generate a JSON completion for a prompt.

        Args:
            prompt: The prompt to send

        Returns:
            Raw completion text

        Raises:
            GenerationTimeout: If the call takes longer than the timeout
            GenerationFailed: If the client cannot be created or the service call fails
            EmptyCompletion: If the service returns no content
        """
        try:
            completion = await asyncio.wait_for(
                self._openai().chat.completions.create(
                    messages=[{"role": "user", "content": prompt}],
                    model=self.model,
                    temperature=self.temperature,
                    response_format={"type": "json_object"},
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            raise GenerationTimeout(f"Generation timed out after {self.timeout}s")
        except openai.OpenAIError as e:
            raise GenerationFailed(f"Chat completion failed: {e}") from e

        content: Optional[str] = None
        if completion.choices:
            content = completion.choices[0].message.content
        if not content:
            raise EmptyCompletion("No response from the generation service")

        logger.debug(f"Completion received ({len(content)} chars)")
        return content

    async def close(self) -> None:
        """Release the underlying HTTP connection pool, if one was opened."""
        if self._client is not None:
            await self._client.close()
