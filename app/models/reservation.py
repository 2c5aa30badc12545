from sqlalchemy import Column, String, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship, validates
from app.models.base import UUIDModel

# Ejes de estado independientes: no hay máquina de estados conjunta
PAYMENT_STATUSES = ("pendiente", "pagado", "rechazado")
DELIVERY_STATUSES = ("pendiente", "en camino", "entregado", "cancelado")

class Reservation(UUIDModel):
    __tablename__ = "reservations"

    rental_start = Column(DateTime, nullable=False)
    rental_end = Column(DateTime, nullable=False)
    address_entrega = Column(String(255), nullable=False)
    price = Column(Float, nullable=False)
    payment_status = Column(String(20), nullable=False, default="pendiente")
    delivery_status = Column(String(20), nullable=False, default="pendiente")
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    machinery_id = Column(String(36), ForeignKey("machinery.id", ondelete="CASCADE"), nullable=False, index=True)
    # Se copia de la maquinaria al crear; nunca lo envía el cliente
    provider_id = Column(String(36), ForeignKey("providers.id", ondelete="CASCADE"), nullable=False, index=True)

    # Relaciones
    user = relationship("User", back_populates="reservations")
    machinery = relationship("Machinery", back_populates="reservations")
    provider = relationship("Provider", viewonly=True)
    payments = relationship("Payment", back_populates="reservation", cascade="all, delete-orphan")

    @validates("rental_start", "rental_end")
    def validate_rental_window(self, key, value):
        start = value if key == "rental_start" else self.rental_start
        end = value if key == "rental_end" else self.rental_end
        if start is not None and end is not None and end <= start:
            raise ValueError("La fecha de finalización debe ser posterior a la de inicio.")
        return value

    @validates("price")
    def validate_price(self, key, value):
        if value is not None and value < 0:
            raise ValueError("El precio no puede ser negativo.")
        return value

    @validates("payment_status")
    def validate_payment_status(self, key, value):
        if value not in PAYMENT_STATUSES:
            raise ValueError(f"Estado de pago inválido: {value}")
        return value

    @validates("delivery_status")
    def validate_delivery_status(self, key, value):
        if value not in DELIVERY_STATUSES:
            raise ValueError(f"Estado de entrega inválido: {value}")
        return value

    def set_rental_window(self, start, end):
        """Reemplaza ambas fechas sin pasar por un rango intermedio inválido."""
        if end <= start:
            raise ValueError("La fecha de finalización debe ser posterior a la de inicio.")
        if self.rental_end is not None and start >= self.rental_end:
            self.rental_end = end
            self.rental_start = start
        else:
            self.rental_start = start
            self.rental_end = end
