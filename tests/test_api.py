import json

import pytest
from fastapi.testclient import TestClient

import config
from conftest import FailingFor, FakeGenerationClient
from profwords.api import _shared_client, app, get_generation_client
from profwords.logger import is_configured


@pytest.fixture
def generator(monkeypatch):
    monkeypatch.setattr(config, "RESPONSE_SCHEMA", "data")
    fake = FakeGenerationClient()
    app.dependency_overrides[get_generation_client] = lambda: fake
    yield fake
    app.dependency_overrides.clear()


@pytest.fixture
def client(generator):
    with TestClient(app) as test_client:
        yield test_client


DOCTOR = {"id": "doctor", "label": "医生", "description": "Works in a hospital"}


def test_words_returns_sentences(client):
    response = client.post(
        "/words",
        json={
            "professions": [DOCTOR],
            "words": [
                {"word": "ubiquitous", "trans": ["adj. 无处不在的"], "usphone": "", "ukphone": ""}
            ],
        },
    )

    assert response.status_code == 200
    word = response.json()["words"][0]
    assert word["term"] == "ubiquitous"
    assert word["translations"] == [{"partOfSpeech": "", "meaning": "adj. 无处不在的"}]
    assert word["sentencesByProfession"] == {"doctor": "doctor uses ubiquitous."}


def test_words_chunks_requests(client, generator):
    words = [{"term": f"w{i}"} for i in range(6)]

    response = client.post("/words", json={"professions": [DOCTOR], "words": words})

    assert response.status_code == 200
    assert len(generator.prompts) == 2
    assert [w["term"] for w in response.json()["words"]] == [f"w{i}" for i in range(6)]


def test_empty_words_is_bad_request(client, generator):
    response = client.post("/words", json={"professions": [DOCTOR], "words": []})

    assert response.status_code == 400
    assert "non-empty" in response.json()["error"]
    assert generator.prompts == []


def test_empty_professions_is_bad_request(client, generator):
    response = client.post("/words", json={"professions": [], "words": [{"term": "a"}]})
    assert response.status_code == 400
    assert generator.prompts == []


def test_missing_profession_id_is_bad_request(client, generator):
    response = client.post(
        "/words", json={"professions": [{"label": "医生"}], "words": [{"term": "a"}]}
    )
    assert response.status_code == 400
    assert "error" in response.json()
    assert generator.prompts == []


def test_missing_term_is_bad_request(client, generator):
    response = client.post(
        "/words", json={"professions": [DOCTOR], "words": [{"trans": ["x"]}]}
    )
    assert response.status_code == 400
    assert generator.prompts == []


def test_empty_term_is_bad_request(client, generator):
    response = client.post(
        "/words", json={"professions": [DOCTOR], "words": [{"term": "a"}, {"term": ""}]}
    )
    assert response.status_code == 400
    assert generator.prompts == []


def test_partial_failure_still_succeeds(monkeypatch):
    monkeypatch.setattr(config, "RESPONSE_SCHEMA", "data")
    app.dependency_overrides[get_generation_client] = lambda: FailingFor("doctor")
    try:
        with TestClient(app) as test_client:
            response = test_client.post(
                "/words",
                json={
                    "professions": [DOCTOR, {"id": "lawyer", "label": "律师"}],
                    "words": [{"term": "abandon"}],
                },
            )
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    body = response.json()
    assert body["words"][0]["sentencesByProfession"] == {"lawyer": "lawyer uses abandon."}
    assert "error" not in body


def test_unexpected_failure_is_internal_error(generator, client):
    def explode(prompt):
        raise RuntimeError("database on fire")

    generator.handler = explode

    response = client.post("/words", json={"professions": [DOCTOR], "words": [{"term": "a"}]})

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


@pytest.fixture
def dicts_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "DICTS_DIR", tmp_path)
    return tmp_path


def test_dict_fetch(client, dicts_dir):
    entries = [{"name": "abandon", "trans": ["v. 放弃"], "usphone": "a", "ukphone": "b"}]
    (dicts_dir / "CET4_T.json").write_text(json.dumps(entries), encoding="utf-8")

    response = client.get("/dictFetch", params={"type": "CET4"})

    assert response.status_code == 200
    assert response.json() == {"dictionary": entries, "count": 1}


@pytest.mark.parametrize("params", [{}, {"type": "TOEFL"}])
def test_dict_fetch_bad_type(client, dicts_dir, params):
    response = client.get("/dictFetch", params=params)
    assert response.status_code == 400
    assert "Invalid exam type" in response.json()["error"]


def test_dict_fetch_missing_file(client, dicts_dir):
    response = client.get("/dictFetch", params={"type": "CET6"})
    assert response.status_code == 404
    assert response.json() == {"error": "Dictionary for CET6 not found"}


def test_dict_fetch_corrupt_file(client, dicts_dir):
    (dicts_dir / "CET6_T.json").write_text("not json", encoding="utf-8")
    response = client.get("/dictFetch", params={"type": "CET6"})
    assert response.status_code == 500


def test_dict_fetch_returns_records_unchanged(client, dicts_dir):
    entries = [
        {
            "name": "abandon",
            "translations": [{"partOfSpeech": "v.", "meaning": "放弃"}],
            "usphone": "əˈbændən",
            "ukphone": "əˈbændən",
            "id": 7,
        },
        {"name": "ability", "trans": ["n. 能力"]},
    ]
    (dicts_dir / "CET4_T.json").write_text(json.dumps(entries), encoding="utf-8")

    response = client.get("/dictFetch", params={"type": "CET4"})

    assert response.status_code == 200
    assert response.json() == {"dictionary": entries, "count": 2}


@pytest.fixture
def unconfigured_api(monkeypatch):
    """The app as deployed without OPENAI_API_KEY and without test overrides."""
    monkeypatch.setattr(config, "RESPONSE_SCHEMA", "data")
    monkeypatch.setattr(config, "OPENAI_API_KEY", None)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    app.dependency_overrides.clear()
    _shared_client.cache_clear()
    with TestClient(app) as test_client:
        yield test_client
    _shared_client.cache_clear()


def test_bad_request_without_api_key(unconfigured_api):
    response = unconfigured_api.post("/words", json={"professions": [DOCTOR], "words": []})

    assert response.status_code == 400
    assert "non-empty" in response.json()["error"]


def test_generation_without_api_key_leaves_sentences_empty(unconfigured_api):
    response = unconfigured_api.post(
        "/words", json={"professions": [DOCTOR], "words": [{"term": "abandon"}]}
    )

    assert response.status_code == 200
    assert response.json()["words"][0]["sentencesByProfession"] == {}


def test_startup_configures_logging(generator, tmp_path):
    assert not is_configured()

    with TestClient(app):
        assert is_configured()

    assert list((tmp_path / "logs").glob("server_*.log"))
