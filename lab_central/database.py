# database.py
from sqlalchemy import MetaData, create_engine
from sqlalchemy.pool import StaticPool

from lab_central.config import DATABASE_URL

# State lives for the lifetime of the process; the default URL is an
# in-memory SQLite database.
metadata = MetaData()


def create_store_engine(url: str = DATABASE_URL):
    """Create the engine backing one LabStore."""
    if url.startswith("sqlite"):
        # One shared connection, so an in-memory database is visible from every thread.
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url)
