import logging
import math
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.core import exceptions
from app.core.guard import ensure_can_mutate
from app.models import car_model, user_model
from app.schemas import car_schema
from app.schemas.pagination_schema import clamp_pagination

logger = logging.getLogger(__name__)

MIN_YEAR = 1950


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def validate_car_fields(car_in: car_schema.CarIn) -> None:
    """
    Valida os campos do anúncio na ordem title, brand, model, year, price.

    O primeiro campo inválido vence; `reason` traz o nome do campo.
    """
    if _is_blank(car_in.title):
        raise exceptions.ValidationError("Title must not be empty", reason="title")
    if _is_blank(car_in.brand):
        raise exceptions.ValidationError("Brand must not be empty", reason="brand")
    if _is_blank(car_in.model):
        raise exceptions.ValidationError("Model must not be empty", reason="model")
    max_year = datetime.now(timezone.utc).year + 1
    if car_in.year is None or car_in.year < MIN_YEAR or car_in.year > max_year:
        raise exceptions.ValidationError(
            f"Year must be between {MIN_YEAR} and {max_year}", reason="year"
        )
    # NaN passa por "<= 0"; infinito não cabe na coluna
    if car_in.price is None or not math.isfinite(car_in.price) or car_in.price <= 0:
        raise exceptions.ValidationError("Price must be greater than 0", reason="price")


def build_features(features: Optional[List[car_schema.CarFeatureIn]]) -> List[car_model.CarFeature]:
    # pares com chave ou valor vazio são descartados
    return [
        car_model.CarFeature(key=f.key.strip(), value=f.value.strip())
        for f in features or []
        if not _is_blank(f.key) and not _is_blank(f.value)
    ]


def _with_children(query):
    return query.options(
        selectinload(car_model.Car.images),
        selectinload(car_model.Car.features),
    )


def get_active_car(db: Session, car_id: int) -> car_model.Car:
    car = _with_children(db.query(car_model.Car)).filter(
        car_model.Car.id == car_id,
        car_model.Car.is_active == True,
    ).first()
    if not car:
        raise exceptions.NotFound("Listing not found")
    return car


def list_cars(
    db: Session,
    active_only: bool = True,
    page: int = 1,
    page_size: int = 20,
) -> Tuple[List[car_model.Car], int, int, int]:
    """
    Lista anúncios paginados, mais recentes primeiro

    Retorna (itens, total, página, tamanho da página) já com a
    paginação corrigida.
    """
    page, page_size = clamp_pagination(page, page_size)
    query = db.query(car_model.Car)
    if active_only:
        query = query.filter(car_model.Car.is_active == True)
    total = query.count()
    offset = (page - 1) * page_size
    if offset >= total:
        # página além do fim: sem consulta (offset enorme estoura o INTEGER do banco)
        return [], total, page, page_size
    items = (
        _with_children(query)
        .order_by(car_model.Car.created_at.desc(), car_model.Car.id.desc())
        .offset(offset)
        .limit(page_size)
        .all()
    )
    return items, total, page, page_size


def get_car(db: Session, car_id: int) -> car_model.Car:
    return get_active_car(db, car_id)


def create_car(db: Session, actor: user_model.User, car_in: car_schema.CarIn) -> car_model.Car:
    ensure_can_mutate(actor)
    validate_car_fields(car_in)

    db_car = car_model.Car(
        title=car_in.title.strip(),
        brand=car_in.brand.strip(),
        model=car_in.model.strip(),
        year=car_in.year,
        price=car_in.price,
        user_id=actor.id,
        is_active=True,
        features=build_features(car_in.features),
    )
    db.add(db_car)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(db_car)
    logger.info(f"Anúncio {db_car.id} criado pelo usuário {actor.id}")
    return db_car


def update_car(
    db: Session,
    car_id: int,
    actor: user_model.User,
    car_in: car_schema.CarIn,
) -> car_model.Car:
    """Sobrescreve os campos e substitui o conjunto inteiro de features."""
    ensure_can_mutate(actor)
    validate_car_fields(car_in)

    car = get_active_car(db, car_id)
    ensure_can_mutate(actor, car.user_id)

    car.title = car_in.title.strip()
    car.brand = car_in.brand.strip()
    car.model = car_in.model.strip()
    car.year = car_in.year
    car.price = car_in.price

    # apaga tudo e reinsere (delete-orphan), sem diff
    car.features = build_features(car_in.features)

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(car)
    return car


def soft_delete_car(db: Session, car_id: int, actor: user_model.User) -> None:
    ensure_can_mutate(actor)
    car = get_active_car(db, car_id)
    ensure_can_mutate(actor, car.user_id)

    car.is_active = False
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    logger.info(f"Anúncio {car_id} desativado pelo usuário {actor.id}")
