import logging
from contextlib import contextmanager
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.exc import SQLAlchemyError

from config import Config

logger = logging.getLogger(__name__)

Base = declarative_base()


def make_engine(database_url=None):
    url = database_url or Config.DATABASE_URL
    connect_args = {}
    if url.startswith('sqlite'):
        # broadcast sends enumerate subscribers from scheduler threads
        connect_args['check_same_thread'] = False
    return create_engine(url, connect_args=connect_args)


def make_session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


engine = make_engine()
SessionLocal = make_session_factory(engine)


def init_db(bind=None):
    """Create any missing tables."""
    # Import models so they register with Base
    import models.subscriber  # noqa: F401

    bind = bind or engine
    logger.info(f"Ensuring database tables exist at {bind.url}")
    Base.metadata.create_all(bind=bind)


@contextmanager
def get_db_session(session_factory=None):
    """Provide a transactional scope around a series of SQLAlchemy operations."""
    db = (session_factory or SessionLocal)()
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"SQLAlchemy Session Error: {e}")
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"General Session Error: {e}")
        raise
    finally:
        db.close()
