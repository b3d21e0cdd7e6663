# Dependências compartilhadas: sessão do banco, usuário autenticado, lifespan
import logging
import os
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.orm import Session

from app.core import database, storage
from app.core.config import settings
from app.core.security import decode_access_token
from app.models import car_model, user_model  # noqa: F401 (registra as tabelas)
from app.services import user_service

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")


def init_db() -> None:
    """Cria tabelas, pasta de uploads e garante um admin. Idempotente."""
    database.Base.metadata.create_all(bind=database.engine)
    os.makedirs(storage.cars_root(), exist_ok=True)
    db = database.SessionLocal()
    try:
        user_service.ensure_admin(
            db,
            username=settings.ADMIN_USERNAME,
            email=settings.ADMIN_EMAIL,
            password=settings.ADMIN_PASSWORD,
        )
    except Exception as e:
        logger.error(f"Erro ao criar usuário admin: {e}", exc_info=True)
        raise
    finally:
        db.close()


# Lifespan handler para startup (cria admin) e shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def get_db():
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> user_model.User:
    """
    Resolve o usuário do token

    O `sub` precisa ser o id numérico do usuário. Usuários bloqueados
    continuam autenticados (leituras funcionam); a guarda recusa as
    alterações.
    """
    credentials_exception = HTTPException(
        status_code=401,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"}
    )
    try:
        payload = decode_access_token(token)
    except JWTError:
        raise credentials_exception
    sub = payload.get("sub")
    if sub is None or not str(sub).isdigit():
        raise credentials_exception
    user = user_service.get_user(db, int(sub))
    if user is None:
        raise credentials_exception
    return user


def get_current_admin(
    current_user: user_model.User = Depends(get_current_user)
) -> user_model.User:
    if not current_user.is_admin:
        raise HTTPException(status_code=403, detail="Admin privileges required")
    return current_user
