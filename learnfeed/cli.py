"""Command line interface for the learnfeed pipeline."""

import argparse
import logging
import sqlite3
import sys

from learnfeed import pipeline
from learnfeed.config import AppConfig, load_config
from learnfeed.errors import MissingArtifactError
from learnfeed.storage.repository import CorpusRepository

logger = logging.getLogger(__name__)

STAGES = ("parse", "posts", "questions", "seed", "all")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="learnfeed",
        description="Turn EPUB books into learning posts and multiple-choice questions",
    )
    parser.add_argument(
        "stage",
        choices=STAGES,
        help="Pipeline stage to run (parse -> posts -> questions -> seed, or all)",
    )
    parser.add_argument(
        "--config", default="config.yaml", metavar="PATH",
        help="YAML configuration file (default: config.yaml)",
    )
    parser.add_argument(
        "--force", action="store_true", default=False,
        help="Regenerate questions for posts that already have them",
    )
    return parser.parse_args(argv)


def run_stage(stage: str, config: AppConfig, force: bool = False) -> None:
    """Dispatch a single stage by name."""
    if stage == "parse":
        pipeline.parse_books(config)
    elif stage == "posts":
        pipeline.generate_posts(config)
    elif stage == "questions":
        pipeline.generate_questions(config, force=force)
    elif stage == "seed":
        pipeline.seed_database(config, CorpusRepository(config.storage.sqlite_path))
    elif stage == "all":
        pipeline.run_all(config, CorpusRepository(config.storage.sqlite_path))
    else:
        raise ValueError(f"Unknown stage: {stage}")


def main(argv: list[str] | None = None) -> int:
    """Run the requested stage and return the process exit status."""
    args = parse_args(argv)
    config = load_config(args.config)

    logging.basicConfig(level=config.logging.level, format=config.logging.format)

    try:
        run_stage(args.stage, config, force=args.force)
    except MissingArtifactError as exc:
        logger.error("%s", exc)
        return 1
    except sqlite3.Error:
        logger.exception("Storage write failed; rerun '%s' to resume", args.stage)
        return 1

    logger.info("Stage '%s' completed", args.stage)
    return 0


if __name__ == "__main__":
    sys.exit(main())
