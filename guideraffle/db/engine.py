from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .utils import resolve_sqlite_url

# Get DB url
load_dotenv()
# Project root directory (repo root)
ROOT_DIR = Path(__file__).resolve().parents[2]
DEFAULT_SQLITE_URL = resolve_sqlite_url(
    os.getenv("DB_URL", "sqlite:///./raffle.db"), ROOT_DIR
)


def make_engine(database_url: Optional[str] = None, echo: bool = False, **kwargs):
    url = resolve_sqlite_url(database_url, ROOT_DIR) if database_url else DEFAULT_SQLITE_URL
    return create_engine(
        url,
        echo=echo,
        future=True,
        **kwargs,
    )


def get_sessionmaker(engine):
    return sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,  # Ledger rows are converted to records after commit
        future=True,
    )
