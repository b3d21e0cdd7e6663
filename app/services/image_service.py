"""
Gerência das imagens de um anúncio

Invariante: um anúncio com imagens tem exatamente uma imagem principal
(is_main). Cada operação grava em um único commit; falha faz rollback.
"""
import logging
from typing import List, Optional, Sequence, Tuple

from fastapi import UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core import exceptions, storage
from app.core.config import settings
from app.core.guard import ensure_can_mutate
from app.models import car_model, user_model
from app.services.car_service import get_active_car

logger = logging.getLogger(__name__)


def _load_owned_car(db: Session, car_id: int, actor: user_model.User) -> car_model.Car:
    car = get_active_car(db, car_id)
    ensure_can_mutate(actor, car.user_id)
    return car


def _find_image(car: car_model.Car, image_id: int) -> car_model.CarImage:
    for img in car.images:
        if img.id == image_id:
            return img
    raise exceptions.NotFound("Image not found")


def sorted_images(car: car_model.Car) -> List[car_model.CarImage]:
    return sorted(car.images, key=lambda img: (img.order, img.id))


async def validate_upload(file: UploadFile) -> Optional[Tuple[bytes, str]]:
    """
    Lê e valida um arquivo enviado

    Retorna (conteúdo, extensão normalizada), ou None para arquivo vazio.
    Lê no máximo o limite + 1 byte.
    """
    max_size = settings.MAX_FILE_SIZE_MB * 1024 * 1024
    too_large = exceptions.ValidationError(
        f"Image must not be larger than {settings.MAX_FILE_SIZE_MB}MB", reason="file-too-large"
    )
    if file.size is not None and file.size > max_size:
        raise too_large
    content = await file.read(max_size + 1)
    if not content:
        return None
    if len(content) > max_size:
        raise too_large
    if not (file.content_type or "").startswith("image/"):
        raise exceptions.ValidationError("Only image files are accepted", reason="not-image")
    ext = storage.normalize_extension(file.filename)
    if ext not in storage.ALLOWED_EXTENSIONS:
        raise exceptions.ValidationError(
            "Only jpg, jpeg, png and webp are accepted", reason="bad-extension"
        )
    return content, ext


async def upload_images(
    db: Session,
    car_id: int,
    actor: user_model.User,
    files: Sequence[UploadFile],
) -> List[car_model.CarImage]:
    ensure_can_mutate(actor)
    if not files:
        raise exceptions.ValidationError("No images were sent", reason="files")

    car = _load_owned_car(db, car_id, actor)

    # valida o lote inteiro antes de gravar qualquer arquivo
    accepted: List[Tuple[bytes, str]] = []
    for file in files:
        validated = await validate_upload(file)
        if validated is None:
            continue
        accepted.append(validated)

    next_order = max((img.order for img in car.images), default=-1) + 1
    has_main = any(img.is_main for img in car.images)

    saved_urls: List[str] = []
    try:
        for content, ext in accepted:
            url = await storage.save(car.id, storage.new_filename(ext), content)
            saved_urls.append(url)
            car.images.append(car_model.CarImage(
                image_url=url,
                is_main=not has_main,
                order=next_order,
            ))
            has_main = True
            next_order += 1
        db.commit()
    except (OSError, SQLAlchemyError):
        db.rollback()
        for url in saved_urls:
            storage.remove(url)
        logger.error(f"Falha ao salvar imagens do anúncio {car_id}", exc_info=True)
        raise

    db.refresh(car)
    logger.info(f"{len(saved_urls)} imagem(ns) enviada(s) para o anúncio {car_id}")
    return sorted_images(car)


def set_main_image(db: Session, car_id: int, image_id: int, actor: user_model.User) -> None:
    ensure_can_mutate(actor)
    car = _load_owned_car(db, car_id, actor)
    target = _find_image(car, image_id)

    for img in car.images:
        img.is_main = img.id == target.id
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


def delete_image(db: Session, car_id: int, image_id: int, actor: user_model.User) -> None:
    """
    Remove a imagem (linha e arquivo)

    Se era a principal, a imagem restante de menor `order` vira principal.
    """
    ensure_can_mutate(actor)
    car = _load_owned_car(db, car_id, actor)
    target = _find_image(car, image_id)
    url = target.image_url
    was_main = target.is_main

    car.images.remove(target)
    if was_main:
        remaining = sorted_images(car)
        if remaining:
            remaining[0].is_main = True
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    storage.remove(url)


def reorder_images(
    db: Session,
    car_id: int,
    actor: user_model.User,
    image_ids: Sequence[int],
) -> List[car_model.CarImage]:
    """
    Aplica order = posição na lista recebida

    Ids repetidos contam uma vez. Imagens não citadas vão para o fim,
    mantendo a ordem relativa anterior, para que os valores de `order`
    continuem únicos.
    """
    ensure_can_mutate(actor)
    if not image_ids:
        raise exceptions.ValidationError("image_ids must not be empty", reason="image_ids")

    car = _load_owned_car(db, car_id, actor)
    by_id = {img.id: img for img in car.images}
    if any(image_id not in by_id for image_id in image_ids):
        raise exceptions.ValidationError(
            "Images do not belong to this listing", reason="foreign-image-id"
        )

    ordered_ids = list(dict.fromkeys(image_ids))
    given = set(ordered_ids)
    omitted = [img.id for img in sorted_images(car) if img.id not in given]
    for position, image_id in enumerate(ordered_ids + omitted):
        by_id[image_id].order = position
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(car)
    return sorted_images(car)
