from fastapi import APIRouter, Depends, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.dependencies import get_db, get_current_user
from app.core.rate_limit import limit
from app.core.security import create_access_token
from app.models import user_model
from app.schemas import user_schema
from app.services import user_service

router = APIRouter(
    prefix="/auth",
    tags=["Auth"],
)


@router.post("/register", response_model=user_schema.Token, status_code=status.HTTP_201_CREATED)
@limit(settings.AUTH_RATE_LIMIT)
def register(
    request: Request,
    user_in: user_schema.RegisterRequest,
    db: Session = Depends(get_db),
):
    user = user_service.register(db, user_in)
    return {"access_token": create_access_token(user), "token_type": "bearer"}


@router.post("/login", response_model=user_schema.Token)
@limit(settings.AUTH_RATE_LIMIT)
def login(
    request: Request,
    credentials: user_schema.LoginRequest,
    db: Session = Depends(get_db),
):
    user = user_service.authenticate(db, credentials.email, credentials.password)
    return {"access_token": create_access_token(user), "token_type": "bearer"}


# Token (formulário OAuth2 da documentação interativa; username = email)
@router.post("/token", response_model=user_schema.Token)
@limit(settings.AUTH_RATE_LIMIT)
def login_for_access_token(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    user = user_service.authenticate(db, form_data.username, form_data.password)
    return {"access_token": create_access_token(user), "token_type": "bearer"}


@router.get("/me", response_model=user_schema.UserOut)
def read_users_me(
    current_user: user_model.User = Depends(get_current_user)
):
    return current_user
