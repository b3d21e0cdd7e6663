# Anúncios e imagens
import os
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, Path, Response, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from app.core import storage
from app.core.dependencies import get_db, get_current_user
from app.models import user_model
from app.schemas import car_schema
from app.schemas.pagination_schema import PaginatedResponse
from app.services import car_service, image_service

router = APIRouter(
    prefix="",
    tags=["Anúncios"],
)


@router.get("/cars", response_model=PaginatedResponse[car_schema.CarOut])
def listar_carros(
    page: int = 1,
    page_size: int = 20,
    db: Session = Depends(get_db),
):
    items, total, page, page_size = car_service.list_cars(db, active_only=True, page=page, page_size=page_size)
    return PaginatedResponse[car_schema.CarOut].create(
        items=[car_schema.CarOut.model_validate(car) for car in items],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/cars/{car_id}", response_model=car_schema.CarOut)
def obter_carro(
    car_id: int = Path(..., description="ID do anúncio"),
    db: Session = Depends(get_db),
):
    return car_service.get_car(db, car_id)


@router.post("/cars", response_model=car_schema.CarCreated, status_code=status.HTTP_201_CREATED)
def criar_carro(
    car_in: car_schema.CarIn,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    car = car_service.create_car(db, current_user, car_in)
    return {"id": car.id}


@router.put("/cars/{car_id}", status_code=status.HTTP_204_NO_CONTENT)
def atualizar_carro(
    car_id: int,
    car_in: car_schema.CarIn,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    car_service.update_car(db, car_id, current_user, car_in)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/cars/{car_id}", status_code=status.HTTP_204_NO_CONTENT)
def remover_carro(
    car_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    car_service.soft_delete_car(db, car_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Imagens
@router.post("/cars/{car_id}/images", response_model=car_schema.ImagesOut)
async def upload_images(
    car_id: int = Path(..., description="ID do anúncio"),
    files: List[UploadFile] = File(...),
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    try:
        images = await image_service.upload_images(db, car_id, current_user, files)
    except OSError:
        raise HTTPException(status_code=500, detail="Error saving file")
    return {"car_id": car_id, "images": images}


@router.put("/cars/{car_id}/images/reorder", status_code=status.HTTP_204_NO_CONTENT)
def reordenar_imagens(
    car_id: int,
    body: car_schema.ReorderImages,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    image_service.reorder_images(db, car_id, current_user, body.image_ids)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/cars/{car_id}/images/{image_id}/main", status_code=status.HTTP_204_NO_CONTENT)
def definir_imagem_principal(
    car_id: int,
    image_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    image_service.set_main_image(db, car_id, image_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/cars/{car_id}/images/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
def remover_imagem(
    car_id: int,
    image_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    image_service.delete_image(db, car_id, image_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Servir imagens
@router.get("/uploads/cars/{car_id}/{filename}")
def serve_image(car_id: int, filename: str):
    safe_name = storage.validar_filename(filename)
    path = os.path.join(storage.car_dir(car_id), safe_name)
    if not os.path.isfile(path):
        raise HTTPException(status_code=404, detail="Image not found")
    return FileResponse(path=path)
