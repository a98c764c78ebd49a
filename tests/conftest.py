"""Shared fixtures and fakes for the ProfWords tests."""

import json
import logging
import re

import pytest

import config
from profwords.errors import GenerationFailed
from profwords.logger import LOGGER_NAME
from profwords.models import Profession, Word

_CONTEXT_LINE = re.compile(r"Professional Context:\s*\n(\S+) \(")
_TERM = re.compile(r'"([^"]+)"')


def profession_in(prompt: str) -> str:
    """Profession id a data-schema prompt was built for."""
    match = _CONTEXT_LINE.search(prompt)
    return match.group(1) if match else ""


def terms_in(prompt: str) -> list[str]:
    """Terms listed on the 'Words to create sentences for' line."""
    line = prompt.split("Words to create sentences for:", 1)[1].strip().splitlines()[0]
    return _TERM.findall(line)


def data_response(sentences: dict[str, str]) -> str:
    return json.dumps({"data": [{"word": w, "sentences": s} for w, s in sentences.items()]})


class FakeGenerationClient:
    """Records prompts and answers each one with `handler(prompt)`."""

    def __init__(self, handler=None):
        self.prompts: list[str] = []
        self.handler = handler or self.echo

    @staticmethod
    def echo(prompt: str) -> str:
        profession = profession_in(prompt)
        return data_response({t: f"{profession} uses {t}." for t in terms_in(prompt)})

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.handler(prompt)


class FailingFor(FakeGenerationClient):
    """Fails every request for the given profession ids."""

    def __init__(self, *profession_ids: str):
        super().__init__()
        self.failing = set(profession_ids)

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if profession_in(prompt) in self.failing:
            raise GenerationFailed("Connection error.")
        return self.echo(prompt)


@pytest.fixture
def doctor() -> Profession:
    return Profession(id="doctor", label="医生", description="Works in a hospital")


@pytest.fixture
def lawyer() -> Profession:
    return Profession(id="lawyer", label="律师")


@pytest.fixture
def make_words():
    def _make(*terms: str) -> list[Word]:
        return [
            Word(term=t, translations=[f"meaning of {t}"], us_phonetic="us", uk_phonetic="uk")
            for t in terms
        ]

    return _make


@pytest.fixture
def fake_client() -> FakeGenerationClient:
    return FakeGenerationClient()


@pytest.fixture(autouse=True)
def isolated_logging(tmp_path, monkeypatch):
    """Keep log files out of the repo and undo handlers the app attaches."""
    monkeypatch.setattr(config, "LOGS_DIR", tmp_path / "logs")
    yield
    package_logger = logging.getLogger(LOGGER_NAME)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)
