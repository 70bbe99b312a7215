# bookstore_toolbag/config.py
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_MONGO_URI = "mongodb://localhost:27017"
DATABASE_NAME = "plp_bookstore"
COLLECTION_NAME = "books"
DEFAULT_EXPLAIN_TITLE = "The Hobbit"

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in _TRUTHY


@dataclass(frozen=True)
class BookstoreConfig:
    """Connection and demo settings handed to BookQueries at construction time."""

    mongo_uri: str = DEFAULT_MONGO_URI
    database_name: str = DATABASE_NAME
    collection_name: str = COLLECTION_NAME
    run_destructive: bool = False
    run_explain: bool = False
    explain_title: str = DEFAULT_EXPLAIN_TITLE

    @classmethod
    def from_env(cls, env_file: Optional[Union[str, Path]] = None) -> "BookstoreConfig":
        """
        Build a config from environment variables, loading a .env file first.

        MONGO_URI falls back to a local server. BOOKSTORE_RUN_DESTRUCTIVE and
        BOOKSTORE_RUN_EXPLAIN accept 1/true/yes/on.
        """
        if env_file is not None:
            load_dotenv(env_file)
        else:
            load_dotenv()

        mongo_uri = os.getenv("MONGO_URI")
        if not mongo_uri:
            logger.warning(f"MONGO_URI is not set. Defaulting to '{DEFAULT_MONGO_URI}'")
            mongo_uri = DEFAULT_MONGO_URI

        return cls(
            mongo_uri=mongo_uri,
            run_destructive=_env_flag("BOOKSTORE_RUN_DESTRUCTIVE"),
            run_explain=_env_flag("BOOKSTORE_RUN_EXPLAIN"),
            explain_title=os.getenv("BOOKSTORE_EXPLAIN_TITLE", DEFAULT_EXPLAIN_TITLE),
        )
