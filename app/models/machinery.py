from sqlalchemy import Column, String, Text, Float, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from app.models.base import UUIDModel

class Machinery(UUIDModel):
    __tablename__ = "machinery"

    name = Column(String(150), nullable=False)
    location = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    rental_price = Column(Float, nullable=False)
    image_code = Column(String(500), nullable=True)  # URL pública de la imagen
    state = Column(Boolean, nullable=False, default=True)
    provider_id = Column(String(36), ForeignKey("providers.id", ondelete="CASCADE"), nullable=False, index=True)

    # Relaciones
    provider = relationship("Provider", back_populates="machinery")
    reservations = relationship("Reservation", back_populates="machinery", cascade="all, delete-orphan")
