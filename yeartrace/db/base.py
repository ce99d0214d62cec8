from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from yeartrace.core.config import settings

_connect_args = (
    {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
)

engine = create_engine(settings.DATABASE_URL, connect_args=_connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    pass


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create missing tables. Local single-user installs skip Alembic."""
    import yeartrace.models  # noqa: F401  (register mappers)

    Base.metadata.create_all(bind=engine)
