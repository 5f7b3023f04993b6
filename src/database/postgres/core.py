from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from src.config import settings

# Note: We instantiate Base here because a single Base object will hold the Metadata
# Calling it in either models or main would desynchronize the ORM
class Base(DeclarativeBase):
    pass

def build_engine(url: str):
    # SQLite connections are shared across FastAPI's worker threads
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args, pool_pre_ping=True)

# Engine & Session Configuration
# Note that currently, sessions are the only way to interface with the database
engine = build_engine(settings.database_url)
SessionFactory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def make_session():
    new_session = SessionFactory()
    try:
        yield new_session
    finally:
        new_session.close()
