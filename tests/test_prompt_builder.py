import pytest

from profwords.errors import EmptyWordSet, InvalidProfession, InvalidWord
from profwords.models import Profession, Word
from profwords.prompt_builder import build_prompt


def test_prompt_lists_every_term_and_context(make_words, doctor):
    prompt = build_prompt(make_words("ubiquitous", "abandon"), doctor, schema="data")

    assert "doctor (Works in a hospital)" in prompt
    assert '"ubiquitous", "abandon"' in prompt
    assert '"data"' in prompt
    assert '"sentences"' in prompt


def test_context_falls_back_to_label(make_words):
    profession = Profession(id="nurse", label="护士")
    prompt = build_prompt(make_words("care"), profession, schema="data")
    assert "nurse (护士)" in prompt


def test_words_schema_prompt_uses_label(make_words, doctor):
    prompt = build_prompt(make_words("ubiquitous"), doctor, schema="words")

    assert "医生" in prompt
    assert '"words"' in prompt
    assert '"partOfSpeech"' in prompt
    assert '"zh"' in prompt
    assert '"ubiquitous"' in prompt


def test_prompt_is_deterministic(make_words, doctor):
    words = make_words("a1", "b2", "c3")
    assert build_prompt(words, doctor, "data") == build_prompt(words, doctor, "data")


def test_missing_profession_rejected(make_words):
    with pytest.raises(InvalidProfession):
        build_prompt(make_words("abandon"), None)


def test_empty_profession_id_rejected(make_words):
    with pytest.raises(InvalidProfession):
        build_prompt(make_words("abandon"), Profession(id="", label="医生"))


def test_all_empty_terms_is_empty_word_set():
    with pytest.raises(EmptyWordSet):
        build_prompt([Word(term=""), Word(term="")], Profession(id="doctor", label="医生"))


def test_no_words_is_empty_word_set(doctor):
    with pytest.raises(EmptyWordSet):
        build_prompt([], doctor)


def test_one_empty_term_is_invalid_word(doctor):
    with pytest.raises(InvalidWord):
        build_prompt([Word(term="abandon"), Word(term="")], doctor)


def test_unknown_schema_rejected(make_words, doctor):
    with pytest.raises(ValueError):
        build_prompt(make_words("abandon"), doctor, schema="xml")
