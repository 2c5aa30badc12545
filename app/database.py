# app/database.py
from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def normalize_database_url(url: str) -> str:
    # Render/Heroku entregan "postgres://", SQLAlchemy exige "postgresql://"
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


def build_engine(database_url: str):
    url = normalize_database_url(database_url)
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        # SQLite en memoria: una sola conexión compartida entre hilos
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


def build_session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request):
    """Dependency que proporciona una sesión de base de datos"""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
