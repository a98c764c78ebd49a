"""Pydantic data models for the ProfWords sentence generation service."""

import secrets
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Translation(BaseModel):
    """One part-of-speech / meaning pair for a word."""

    model_config = ConfigDict(populate_by_name=True)

    part_of_speech: str = Field(default="", alias="partOfSpeech")
    meaning: str


class Word(BaseModel):
    """A vocabulary entry with its per-profession example sentences."""

    model_config = ConfigDict(populate_by_name=True)

    term: str = Field(alias="term", validation_alias=AliasChoices("term", "word"))
    translations: list[Translation] = Field(
        default_factory=list,
        alias="translations",
        validation_alias=AliasChoices("translations", "trans"),
    )
    us_phonetic: str = Field(
        default="", alias="usPhonetic", validation_alias=AliasChoices("usPhonetic", "usphone")
    )
    uk_phonetic: str = Field(
        default="", alias="ukPhonetic", validation_alias=AliasChoices("ukPhonetic", "ukphone")
    )
    # profession key -> sentence, insertion order = generation order
    sentences_by_profession: dict[str, str] = Field(
        default_factory=dict,
        alias="sentencesByProfession",
        validation_alias=AliasChoices("sentencesByProfession", "sentences"),
    )

    @field_validator("translations", mode="before")
    @classmethod
    def _coerce_legacy_trans(cls, value):
        # Dictionary files carry plain meaning strings without a part of speech
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        if isinstance(value, list):
            return [
                {"partOfSpeech": "", "meaning": item} if isinstance(item, str) else item
                for item in value
            ]
        return value

    @field_validator("us_phonetic", "uk_phonetic", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value

    @field_validator("sentences_by_profession", mode="before")
    @classmethod
    def _flatten_sentence_objects(cls, value):
        # Older snapshots stored {"en": ..., "zh": ...} per profession
        if value is None:
            return {}
        if isinstance(value, dict):
            return {
                key: sentence.get("en", "") if isinstance(sentence, dict) else sentence
                for key, sentence in value.items()
            }
        return value

    def fresh_copy(self) -> "Word":
        """Copy of this word with an empty sentence map."""
        return self.model_copy(
            update={
                "translations": list(self.translations),
                "sentences_by_profession": {},
            }
        )


class Profession(BaseModel):
    """A professional context used to steer sentence generation."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    label: str
    description: str = ""
    is_custom: bool = Field(default=False, alias="isCustom")

    @property
    def key(self) -> str:
        """Key used in a word's sentence map."""
        return self.id or self.label

    @property
    def context(self) -> str:
        """Short description placed next to the id in prompts."""
        return self.description or self.label

    @classmethod
    def custom(cls, label: str, description: str = "") -> "Profession":
        """Create a user-defined profession with a generated unique id."""
        return cls(
            id=f"custom-{secrets.token_hex(4)}",
            label=label,
            description=description,
            is_custom=True,
        )


class GenerationRequest(BaseModel):
    """One chunk of words paired with one profession."""

    chunk_index: int
    words: list[Word]
    profession: Profession

    @property
    def terms(self) -> list[str]:
        return [w.term for w in self.words]


class GenerationResult(BaseModel):
    """Outcome of a single generation request."""

    request: GenerationRequest
    raw_response: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class EnrichmentResult(BaseModel):
    """Merged word collection plus the failures collected along the way."""

    words: list[Word]
    errors: list[str] = Field(default_factory=list)


class DictionaryEntry(BaseModel):
    """
    A raw record from a static exam dictionary file.

    Older files list meanings under `trans`, newer ones under `translations`.
    Unknown fields are kept so the record can be served back unchanged.
    """

    model_config = ConfigDict(extra="allow")

    name: str
    trans: Optional[list[str]] = None
    translations: Optional[list[Translation]] = None
    usphone: Optional[str] = ""
    ukphone: Optional[str] = ""

    @field_validator("translations", mode="before")
    @classmethod
    def _coerce_plain_meanings(cls, value):
        if isinstance(value, list):
            return [
                {"partOfSpeech": "", "meaning": item} if isinstance(item, str) else item
                for item in value
            ]
        return value

    def word_translations(self) -> list[Translation]:
        """Meanings in the Word shape, whichever key the file used."""
        if self.translations is not None:
            return list(self.translations)
        return [Translation(part_of_speech="", meaning=m) for m in self.trans or []]

    def to_record(self) -> dict[str, Any]:
        """The record as read from the file, extra keys included."""
        record = self.model_dump(mode="json", by_alias=True, exclude_unset=True)
        record.update(self.model_extra or {})
        return record


class WordsRequest(BaseModel):
    """Body of POST /words."""

    model_config = ConfigDict(populate_by_name=True)

    professions: list[Profession]
    words: list[Word]
    category: Optional[str] = None
    regenerate_only: bool = Field(default=False, alias="regenerateOnly")


class WordsResponse(BaseModel):
    """Body returned by POST /words."""

    words: list[Word]


class DictionaryResponse(BaseModel):
    """Body returned by GET /dictFetch."""

    # Raw records, see DictionaryEntry.to_record
    dictionary: list[dict[str, Any]]
    count: int


class GeneratedSentence(BaseModel):
    """A sentence (and optional translations) parsed from a model response."""

    sentence: str
    translations: Optional[list[Translation]] = None
