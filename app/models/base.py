import uuid
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from app.database import Base


def new_uuid() -> str:
    return str(uuid.uuid4())


class UUIDModel(Base):
    __abstract__ = True
    id = Column(String(36), primary_key=True, default=new_uuid, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
