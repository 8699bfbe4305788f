"""Configuration loader for the learnfeed content pipeline."""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_IMPORTANCE_MARKERS: list[str] = [
    "important",
    "key",
    "critical",
    "essential",
    "must",
    "should",
    "always",
    "never",
    "principle",
    "rule",
    "framework",
    "strategy",
    "method",
    "technique",
    "process",
]


class AppInfo(BaseModel):
    """Application metadata."""

    name: str = "learnfeed"
    version: str = "1.0.0"


class ParsingConfig(BaseModel):
    """Source normalization configuration."""

    min_chapter_chars: int = 100


class ChunkingConfig(BaseModel):
    """Post chunking configuration."""

    max_post_chars: int = 150
    posts_per_chapter: int = 15
    min_sentence_chars: int = 20
    boundary_ratio: float = 0.7


class QuestionConfig(BaseModel):
    """Question synthesis configuration."""

    questions_per_post: int = 2
    distractor_count: int = 3
    max_numeric_offset: int = 5
    importance_markers: list[str] = Field(
        default_factory=lambda: list(DEFAULT_IMPORTANCE_MARKERS)
    )


class StorageConfig(BaseModel):
    """Storage paths configuration."""

    books_dir: str = "./books"
    data_dir: str = "./data"
    sqlite_path: str = "./db/corpus.db"


class LoggingConfig(BaseModel):
    """Logging configuration for the command line."""

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class AppConfig(BaseModel):
    """Root application configuration."""

    app: AppInfo = Field(default_factory=AppInfo)
    parsing: ParsingConfig = Field(default_factory=ParsingConfig)
    chunking: ChunkingConfig = Field(default_factory=ChunkingConfig)
    questions: QuestionConfig = Field(default_factory=QuestionConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: str | Path = "config.yaml") -> AppConfig:
    """Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Fully populated AppConfig instance.
    """
    load_dotenv()

    yaml_data: dict = {}
    config_file = Path(config_path)
    if config_file.exists():
        with open(config_file) as f:
            yaml_data = yaml.safe_load(f) or {}

    config = AppConfig(**yaml_data)

    # Environment overrides
    db_path = os.getenv("LEARNFEED_DB_PATH")
    if db_path:
        config.storage.sqlite_path = db_path
    log_level = os.getenv("LEARNFEED_LOG_LEVEL")
    if log_level:
        config.logging.level = log_level.upper()

    return config
