"""Prompt construction for profession-contextualised example sentences."""

from functools import lru_cache
from pathlib import Path
from typing import Optional, Sequence

import config
from profwords.errors import EmptyWordSet, InvalidProfession, InvalidWord
from profwords.models import Profession, Word

SCHEMAS = tuple(config.PROMPT_TEMPLATES)


@lru_cache(maxsize=None)
def load_prompt_template(path: Path) -> str:
    """Load a prompt template from file."""
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def validate_profession(profession: Optional[Profession]) -> Profession:
    """Return the profession, or raise InvalidProfession if it is unusable."""
    if profession is None:
        raise InvalidProfession("Invalid profession: profession object is required")
    if not profession.id:
        raise InvalidProfession(
            f"Invalid profession: id is required, got {profession.model_dump(by_alias=True)}"
        )
    return profession


def extract_terms(words: Sequence[Optional[Word]]) -> list[str]:
    """
    Collect the terms of a word batch in order.

    Raises:
        EmptyWordSet: If no word carries a term
        InvalidWord: If some, but not all, words lack a term
    """
    terms = [w.term for w in words if w is not None and w.term]
    if not terms:
        raise EmptyWordSet("No valid words provided")
    if len(terms) != len(words):
        raise InvalidWord("Invalid word object: term is required")
    return terms


def build_prompt(
    words: Sequence[Word],
    profession: Profession,
    schema: str = config.RESPONSE_SCHEMA,
) -> str:
    """
    Build the instruction sent to the generative service for one chunk.

    Args:
        words: Words to generate sentences for, in chunk order
        profession: Professional context for the sentences
        schema: Response schema to ask for, "data" or "words"

    Returns:
        The prompt text
    """
    profession = validate_profession(profession)
    terms = extract_terms(words)

    if schema not in config.PROMPT_TEMPLATES:
        raise ValueError(f"Unknown response schema: {schema}")

    template = load_prompt_template(config.PROMPT_TEMPLATES[schema])
    return template.format(
        profession_id=profession.id,
        profession_label=profession.label or profession.id,
        profession_context=profession.context,
        word_list=", ".join(f'"{term}"' for term in terms),
    )
