#!/usr/bin/env python3
"""ProfWords - profession-contextualised vocabulary sentences."""

import argparse
import asyncio
import json
import sys
from datetime import datetime
from pathlib import Path

from tqdm import tqdm

import config
from profwords.dictionary import chapter_count, get_words_from_chapter, load_dictionary
from profwords.errors import DictionaryError, ProfWordsError
from profwords.generation_client import GenerationClient
from profwords.logger import setup_logger, setup_server_logger
from profwords.models import EnrichmentResult, Profession, Word
from profwords.pipeline import enrich_words
from profwords.prompt_builder import SCHEMAS


def parse_profession(value: str) -> Profession:
    """Parse 'id[:label[:description]]' into a Profession."""
    parts = value.split(":", 2)
    if not parts[0]:
        raise argparse.ArgumentTypeError(f"Invalid profession: {value}")
    profession_id = parts[0]
    label = parts[1] if len(parts) > 1 and parts[1] else profession_id
    description = parts[2] if len(parts) > 2 else ""
    return Profession(id=profession_id, label=label, description=description)


def save_output(result: EnrichmentResult, path: Path) -> None:
    """Save enriched words to JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(
            {"words": [w.model_dump(by_alias=True) for w in result.words]},
            f,
            ensure_ascii=False,
            indent=2,
        )


async def run_generation(
    words: list[Word],
    professions: list[Profession],
    schema: str,
) -> EnrichmentResult:
    """Run the pipeline against the configured service with a progress bar."""
    client = GenerationClient.from_config()
    total = -(-len(words) // config.CHUNK_SIZE) * len(professions)
    try:
        with tqdm(total=total, desc="  Generating") as pbar:
            return await enrich_words(
                words,
                professions,
                client,
                schema=schema,
                progress=lambda _result: pbar.update(1),
            )
    finally:
        await client.close()


def cmd_generate(args, logger) -> int:
    custom = [Profession.custom(label) for label in args.custom_profession]
    professions = args.profession + custom
    if not professions:
        logger.error("At least one --profession or --custom-profession is required")
        return 1

    entries = load_dictionary(args.exam_type)
    chapters = chapter_count(entries)
    if args.chapter > chapters:
        logger.error(f"{args.exam_type} has only {chapters} chapters")
        return 1

    words = get_words_from_chapter(entries, args.chapter)
    if args.dry_run:
        words = words[: config.DRY_RUN_LIMIT]

    output_path = config.get_output_path(args.exam_type, args.chapter, datetime.now())

    logger.info("=" * 60)
    logger.info("ProfWords Sentence Generation")
    logger.info("=" * 60)
    logger.info(f"Dictionary: {args.exam_type}, chapter {args.chapter}/{chapters}")
    logger.info(f"Professions: {', '.join(p.key for p in professions)}")
    logger.info(f"Schema: {args.schema}")
    if args.dry_run:
        logger.info(f"Mode: Dry run ({len(words)} words)")
    logger.info(f"Output: {output_path}")
    logger.info("=" * 60)

    result = asyncio.run(run_generation(words, professions, args.schema))
    save_output(result, output_path)

    complete = sum(
        1 for w in result.words if len(w.sentences_by_profession) == len(professions)
    )
    logger.info(f"Saved {len(result.words)} words to: {output_path}")
    logger.info(f"Words with every sentence: {complete}/{len(result.words)}")
    if result.errors:
        logger.warning(f"Failed requests: {len(result.errors)}")
    return 0


def cmd_serve(args, logger) -> int:
    import uvicorn

    logger.info(f"Serving ProfWords API on http://{args.host}:{args.port}")
    uvicorn.run("profwords.api:app", host=args.host, port=args.port, log_level="info")
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="ProfWords - profession-contextualised vocabulary sentences",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate sentences for chapter 3 of CET4 for two professions
  python main.py generate --exam-type CET4 --chapter 3 \\
      --profession "doctor:医生:Works in a hospital" --profession programmer

  # Quick check with a handful of words
  python main.py generate --exam-type CET6 --chapter 1 --profession lawyer --dry-run

  # Run the HTTP API
  python main.py serve --port 8000
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    gen = subparsers.add_parser("generate", help="Generate sentences for one chapter")
    gen.add_argument("--exam-type", required=True, choices=config.EXAM_TYPES)
    gen.add_argument("--chapter", type=int, default=1, help="1-based chapter number")
    gen.add_argument(
        "--profession",
        type=parse_profession,
        action="append",
        default=[],
        help="Profession as 'id[:label[:description]]' (repeatable)",
    )
    gen.add_argument(
        "--custom-profession",
        action="append",
        default=[],
        help="Label of a custom profession; an id is generated (repeatable)",
    )
    gen.add_argument("--schema", choices=SCHEMAS, default=config.RESPONSE_SCHEMA)
    gen.add_argument(
        "--dry-run",
        action="store_true",
        help=f"Process only {config.DRY_RUN_LIMIT} words for testing",
    )

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=config.SERVER_HOST)
    serve.add_argument("--port", type=int, default=config.SERVER_PORT)

    args = parser.parse_args()

    if args.command == "serve":
        logger = setup_server_logger()
        sys.exit(cmd_serve(args, logger))

    logger = setup_logger()
    if args.chapter < 1:
        logger.error("--chapter must be >= 1")
        sys.exit(1)

    try:
        sys.exit(cmd_generate(args, logger))
    except KeyboardInterrupt:
        logger.warning("Generation interrupted by user.")
        sys.exit(1)
    except DictionaryError as e:
        logger.error(f"Dictionary error: {e}")
        sys.exit(1)
    except ProfWordsError as e:
        logger.error(f"Generation error: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Pipeline error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
