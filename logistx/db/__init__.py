"""Database package: engine factory, init_db(), session_scope()."""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import Engine, create_engine, func, select
from sqlalchemy.orm import Session, sessionmaker

from logistx.db.base import Base

# Import all models so Base.metadata has all tables
from logistx.db.models import MODELS_BY_TABLE, Category  # noqa: F401


def make_engine(url: str) -> Engine:
    """Create engine with check_same_thread=False for use from worker threads."""
    if url.startswith("sqlite"):
        if "?" in url:
            url += "&check_same_thread=False"
        else:
            url += "?check_same_thread=False"
    return create_engine(url, echo=False)


def init_db(engine: Engine, seed: bool = False) -> None:
    """Create tables. With seed=True, insert the demo dataset when the catalog is empty."""
    Base.metadata.create_all(bind=engine)
    if not seed:
        return
    from logistx.db.seed_data import seed_demo_data

    with Session(bind=engine) as session:
        if session.scalar(select(func.count()).select_from(Category)):
            return
        seed_demo_data(session)
        session.commit()


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@contextmanager
def session_scope(factory: sessionmaker) -> Generator[Session, None, None]:
    """Context manager yielding a DB session; commits on success, rolls back on error."""
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
