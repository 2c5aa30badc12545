from sqlalchemy import Column, String, Float
from sqlalchemy.orm import relationship
from app.models.base import UUIDModel

class Provider(UUIDModel):
    __tablename__ = "providers"

    name = Column(String(100), nullable=False)
    email = Column(String(150), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)  # hash bcrypt
    phone_number = Column(String(20), nullable=False)
    rating = Column(Float, default=0.0)

    # Relaciones
    machinery = relationship("Machinery", back_populates="provider", cascade="all, delete-orphan")
