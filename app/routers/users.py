import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.user import User
from app.schemas.user import UserResponse, UserCreate, UserUpdate, LoginRequest
from app.core.security import get_password_hash, verify_password
from app.core.exceptions import AuthException, BadRequestException, NotFoundException

logger = logging.getLogger(__name__)
router = APIRouter()

EMAIL_EN_USO = "El correo electrónico ya está en uso"

def email_in_use(db: Session, email: str, exclude_id: str = None) -> bool:
    query = db.query(User.id).filter(User.email == email)
    if exclude_id:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None

def get_user_or_404(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundException("Usuario no encontrado")
    return user

@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(user_data: UserCreate, db: Session = Depends(get_db)):
    # Verificar si el correo ya está registrado
    if email_in_use(db, user_data.email):
        raise BadRequestException(EMAIL_EN_USO)

    db_user = User(
        name=user_data.name,
        email=user_data.email,
        password=get_password_hash(user_data.password),
        phone_number=user_data.phone_number,
    )
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        # Otro request registró el mismo correo entre la consulta y el commit
        db.rollback()
        raise BadRequestException(EMAIL_EN_USO)
    db.refresh(db_user)
    logger.info(f"Usuario creado: {db_user.id}")
    return db_user

@router.get("/", response_model=list[UserResponse])
def get_users(db: Session = Depends(get_db)):
    return db.query(User).all()

@router.post("/login", response_model=UserResponse)
def login_user(credentials: LoginRequest, db: Session = Depends(get_db)):
    """Compara credenciales; no emite token de sesión"""
    user = db.query(User).filter(User.email == credentials.email).first()
    if not user or not verify_password(credentials.password, user.password):
        raise AuthException("Correo o contraseña incorrectos")
    return user

@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: str, db: Session = Depends(get_db)):
    return get_user_or_404(db, user_id)

@router.put("/{user_id}", response_model=UserResponse)
def update_user(user_id: str, user_data: UserUpdate, db: Session = Depends(get_db)):
    user = get_user_or_404(db, user_id)

    # Si cambia el email, verificar que no lo use otro usuario
    if user_data.email != user.email and email_in_use(db, user_data.email, exclude_id=user_id):
        raise BadRequestException(EMAIL_EN_USO)

    user.name = user_data.name
    user.email = user_data.email
    user.phone_number = user_data.phone_number
    if user_data.password:
        user.password = get_password_hash(user_data.password)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise BadRequestException(EMAIL_EN_USO)
    db.refresh(user)
    return user

@router.delete("/{user_id}")
def delete_user(user_id: str, db: Session = Depends(get_db)):
    user = get_user_or_404(db, user_id)
    db.delete(user)
    db.commit()
    logger.info(f"Usuario eliminado: {user_id}")
    return {"message": "Usuario eliminado exitosamente"}
