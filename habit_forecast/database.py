import os

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from habit_forecast.constants import DEFAULT_DATABASE_URL

DATABASE_URL = os.getenv("HABIT_FORECAST_DATABASE_URL", DEFAULT_DATABASE_URL)

engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {},
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Yield a database session and close it after the request"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
