import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core import exceptions
from app.models import car_model, user_model

logger = logging.getLogger(__name__)


def block_user(db: Session, user_id: int, blocked: bool) -> user_model.User:
    """
    Bloqueia/desbloqueia o usuário

    Tokens emitidos antes do bloqueio continuam válidos até expirar; o
    bloqueio vale no login e na guarda de cada alteração.
    """
    user = db.get(user_model.User, user_id)
    if not user:
        raise exceptions.NotFound("User not found")
    user.is_blocked = blocked
    db.commit()
    db.refresh(user)
    logger.info(f"Usuário {user_id} {'bloqueado' if blocked else 'desbloqueado'}")
    return user


def set_car_active(db: Session, car_id: int, active: bool) -> car_model.Car:
    car = db.get(car_model.Car, car_id)
    if not car:
        raise exceptions.NotFound("Listing not found")
    car.is_active = active
    db.commit()
    db.refresh(car)
    logger.info(f"Anúncio {car_id} {'ativado' if active else 'desativado'} pela moderação")
    return car


def list_all_cars(db: Session, active: Optional[bool] = None) -> List[car_model.Car]:
    query = db.query(car_model.Car)
    if active is not None:
        query = query.filter(car_model.Car.is_active == active)
    return query.order_by(car_model.Car.created_at.desc(), car_model.Car.id.desc()).all()
