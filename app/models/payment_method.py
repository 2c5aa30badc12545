from sqlalchemy import Column, String, ForeignKey
from sqlalchemy.orm import relationship
from app.models.base import UUIDModel
from app.core.security import mask_card_number

class PaymentMethod(UUIDModel):
    __tablename__ = "payment_methods"

    card_holder = Column(String(150), nullable=False)
    card_last4 = Column(String(4), nullable=False)
    card_fingerprint = Column(String(64), nullable=False, index=True)
    cvv_hash = Column(String(255), nullable=False)
    expiration_date = Column(String(5), nullable=False)  # MM/YY
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Relaciones
    user = relationship("User", back_populates="payment_methods")

    @property
    def card_number(self) -> str:
        return mask_card_number(self.card_last4)
