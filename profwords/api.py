"""HTTP boundary: POST /words and GET /dictFetch."""

from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

import config
from profwords.dictionary import load_dictionary
from profwords.errors import (
    DictionaryNotFound,
    DictionaryReadError,
    UnknownExamType,
    ValidationError,
)
from profwords.generation_client import GenerationClient
from profwords.logger import get_logger, setup_server_logger
from profwords.models import DictionaryResponse, WordsRequest, WordsResponse
from profwords.pipeline import enrich_words

logger = get_logger("profwords.api")


@lru_cache(maxsize=1)
def _shared_client() -> GenerationClient:
    return GenerationClient.from_config()


def get_generation_client() -> GenerationClient:
    """
    Dependency providing the generation client.

    The OpenAI connection is opened on the first generation call, so request
    validation never depends on the API key being set.
    """
    return _shared_client()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Under a bare `uvicorn profwords.api:app` nothing else configures logging
    setup_server_logger()
    logger.info(
        f"ProfWords API started (schema={config.RESPONSE_SCHEMA}, model={config.OPENAI_MODEL})"
    )
    yield
    if _shared_client.cache_info().currsize:
        await _shared_client().close()
        _shared_client.cache_clear()


# ───────── App ─────────
app = FastAPI(title="ProfWords API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()) if p != 'body')}: {err.get('msg')}"
        for err in exc.errors()
    )
    return _error(400, f"Invalid request: {problems}")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail))


# ───────── Routes ─────────
@app.post("/words", response_model=WordsResponse)
async def generate_words(
    body: WordsRequest,
    client: GenerationClient = Depends(get_generation_client),
):
    logger.info(
        f"POST /words: {len(body.words)} words, {len(body.professions)} professions"
        f" (category={body.category}, regenerate_only={body.regenerate_only})"
    )
    try:
        result = await enrich_words(
            body.words, body.professions, client, schema=config.RESPONSE_SCHEMA
        )
    except ValidationError as e:
        logger.warning(f"Rejected request: {e}")
        return _error(400, str(e))
    except Exception as e:
        logger.error(f"Error generating words: {e}", exc_info=True)
        return _error(500, "Internal server error")

    return WordsResponse(words=result.words)


@app.get("/dictFetch", response_model=DictionaryResponse)
def dict_fetch(exam_type: Optional[str] = Query(default=None, alias="type")):
    try:
        entries = load_dictionary(exam_type)
    except UnknownExamType as e:
        return _error(400, str(e))
    except DictionaryNotFound as e:
        return _error(404, str(e))
    except DictionaryReadError as e:
        logger.error(f"Error reading dictionary file: {e}")
        return _error(500, "Failed to fetch dictionary data")

    return DictionaryResponse(
        dictionary=[entry.to_record() for entry in entries], count=len(entries)
    )
