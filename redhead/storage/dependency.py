import os
import logging
from typing import Annotated, Iterator
from dotenv import load_dotenv
from fastapi import Depends

from ..database.core import Base, SessionLocal, engine
from .database import SqlStorage
from .interface import Storage
from .memory import MemStorage

load_dotenv()

STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory").lower()

memory_storage = MemStorage()


def init_storage() -> None:
    """Creates the tables when the SQL backend is selected."""
    if STORAGE_BACKEND == "database":
        logging.info("Creating database tables for the SQL storage backend.")
        Base.metadata.create_all(bind=engine)
    else:
        logging.info("Using the in-memory storage backend.")


def get_storage() -> Iterator[Storage]:
    if STORAGE_BACKEND == "database":
        db = SessionLocal()
        try:
            yield SqlStorage(db)
        finally:
            db.close()
    else:
        yield memory_storage


StorageDep = Annotated[Storage, Depends(get_storage)]
