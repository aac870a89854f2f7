from pathlib import Path
from sqlmodel import SQLModel, create_engine, Session
from ..core.config import settings

engine = create_engine(
    settings.DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {},
)

def init_db() -> None:
    from . import models  # noqa: F401
    if settings.DATABASE_URL.startswith("sqlite:///"):
        db_file = settings.DATABASE_URL[len("sqlite:///"):]
        if db_file and db_file != ":memory:":
            Path(db_file).parent.mkdir(parents=True, exist_ok=True)
    SQLModel.metadata.create_all(engine)

def get_session():
    with Session(engine) as session:
        yield session
