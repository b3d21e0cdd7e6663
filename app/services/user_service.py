import logging
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core import exceptions
from app.core.security import hash_password, verify_password
from app.models import user_model
from app.schemas import user_schema

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: int) -> Optional[user_model.User]:
    return db.get(user_model.User, user_id)


def get_user_by_username(db: Session, username: str):
    return db.query(user_model.User).filter(user_model.User.username == username).first()


def get_user_by_email(db: Session, email: str):
    return db.query(user_model.User).filter(user_model.User.email == email.strip().lower()).first()


def user_exists(db: Session, username: str, email: str) -> bool:
    query = db.query(user_model.User).filter(
        or_(user_model.User.email == email, user_model.User.username == username)
    )
    return db.query(query.exists()).scalar()


def create_user(
    db: Session,
    username: str,
    email: str,
    password: str,
    role: str = user_model.ROLE_USER,
) -> user_model.User:
    db_user = user_model.User(
        username=username,
        email=email.strip().lower(),
        hashed_password=hash_password(password),
        role=role,
        is_blocked=False,
    )
    db.add(db_user)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(db_user)
    return db_user


def register(db: Session, user_in: user_schema.RegisterRequest) -> user_model.User:
    username = user_in.username.strip()
    email = str(user_in.email).strip().lower()
    if not username or not email or not user_in.password.strip():
        raise exceptions.ValidationError(
            "Username, email and password must not be empty", reason="credentials"
        )
    if user_exists(db, username, email):
        raise exceptions.Conflict("Email or username already registered")

    try:
        user = create_user(db, username, email, user_in.password)
    except IntegrityError:
        # cadastro concorrente com o mesmo email/username
        raise exceptions.Conflict("Email or username already registered")
    logger.info(f"Usuário '{user.username}' registrado (id={user.id})")
    return user


def authenticate(db: Session, email: str, password: str) -> user_model.User:
    """
    Verifica email/senha para o login

    Usuário bloqueado não recebe token novo; tokens já emitidos
    continuam válidos até expirar.
    """
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.hashed_password):
        raise exceptions.Unauthenticated("Invalid email or password")
    if user.is_blocked:
        raise exceptions.Unauthenticated("User is blocked", reason="blocked")
    return user


def ensure_admin(db: Session, username: str, email: str, password: str) -> Optional[user_model.User]:
    """Cria o admin inicial se ainda não houver nenhum admin. Idempotente."""
    exists = db.query(user_model.User).filter(user_model.User.role == user_model.ROLE_ADMIN).first()
    if exists:
        return None
    admin = create_user(db, username, email, password, role=user_model.ROLE_ADMIN)
    logger.info(f"Usuário admin '{admin.username}' criado com sucesso")
    return admin
