from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from app.models.base import UUIDModel

class User(UUIDModel):
    __tablename__ = "users"

    name = Column(String(100), nullable=False)
    email = Column(String(150), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)  # hash bcrypt
    phone_number = Column(String(20), nullable=False)

    # Relaciones
    reservations = relationship("Reservation", back_populates="user", cascade="all, delete-orphan")
    payment_methods = relationship("PaymentMethod", back_populates="user", cascade="all, delete-orphan")
