import os
import subprocess
import sys

import pytest

import config


@pytest.mark.parametrize("schema", ["data", "words"])
def test_known_schemas_pass(schema):
    assert config.check_response_schema(schema) == schema


@pytest.mark.parametrize("schema", ["", "Data", "json"])
def test_unknown_schema_rejected(schema):
    with pytest.raises(ValueError, match="Unknown response schema"):
        config.check_response_schema(schema)


def test_bad_schema_env_fails_at_import():
    env = dict(os.environ, PROFWORDS_RESPONSE_SCHEMA="bogus")

    completed = subprocess.run(
        [sys.executable, "-c", "import config"],
        cwd=config.PROJECT_ROOT,
        env=env,
        capture_output=True,
        text=True,
    )

    assert completed.returncode != 0
    assert "Unknown response schema 'bogus'" in completed.stderr
