from sqlalchemy import Column, String, Integer, DateTime
from sqlalchemy.sql import func
from app.database import Base

class Upload(Base):
    __tablename__ = "uploads"

    id = Column(Integer, primary_key=True, index=True)
    image_url = Column(String(500), nullable=False)
    nombre_maquina = Column(String(150), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
