# storefront/data/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from storefront.utils.settings import DATABASE_URL

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=connect_args)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)

Base = declarative_base()


def init_db(bind=None) -> None:
    # import modeli zeby zarejestrowaly sie w Base.metadata
    from storefront.data.models import RecordModel  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
