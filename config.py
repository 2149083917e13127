from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import Mapping


APP_NAME = "KeyFlow"
DATA_DIR = Path.home() / ".keyflow"
LOG_FILE = DATA_DIR / "keyflow.log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Passage sources
PASSAGE_SOURCES = ("sample", "wikipedia")
DEFAULT_PASSAGE_SOURCE = "sample"

# Wikipedia fetch limits
WIKI_MIN_CHARS = 600
WIKI_MAX_CHARS = 1200
WIKI_TRIES = 5
WIKI_TIMEOUT = 8

# Keys highlighted on the on-screen keyboard for the current exercise
DEFAULT_FOCUS_LETTERS = "ASDF"


@dataclass(frozen=True)
class Settings:
    passage_source: str = DEFAULT_PASSAGE_SOURCE
    focus_letters: str = DEFAULT_FOCUS_LETTERS
    log_file: Path = LOG_FILE
    log_level: int = logging.INFO


def _parse_log_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ
    log_file = env.get("KEYFLOW_LOG_FILE")
    return Settings(
        passage_source=env.get("KEYFLOW_PASSAGE_SOURCE", DEFAULT_PASSAGE_SOURCE).strip().lower(),
        focus_letters=env.get("KEYFLOW_FOCUS_LETTERS", DEFAULT_FOCUS_LETTERS).strip().upper(),
        log_file=Path(log_file).expanduser() if log_file else LOG_FILE,
        log_level=_parse_log_level(env.get("KEYFLOW_LOG_LEVEL", "INFO")),
    )
