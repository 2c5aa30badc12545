from pydantic import BaseModel, EmailStr, Field

class SendEmailRequest(BaseModel):
    """Datos de la confirmación de reserva que envía la app"""
    email: EmailStr
    name: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    delivery_date: str = Field(..., min_length=1)
    machinery_name: str = Field(..., min_length=1)
    machinery_details: str = Field(..., min_length=1)
    rental_days: int = Field(..., gt=0)
