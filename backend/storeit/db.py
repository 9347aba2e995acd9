# storeit/db.py
from sqlmodel import SQLModel, create_engine, Session
from . import config

if config.DATABASE_URL.startswith("sqlite"):
    engine = create_engine(
        config.DATABASE_URL,
        echo=config.DATABASE_ECHO,
        connect_args={"check_same_thread": False},
    )
else:
    engine = create_engine(config.DATABASE_URL, echo=config.DATABASE_ECHO)


def init_db(bind=None):
    from .models import Account, User, File, SessionModel, OTP  # noqa: F401
    SQLModel.metadata.create_all(bind or engine)


def get_session():
    with Session(engine) as session:
        yield session
