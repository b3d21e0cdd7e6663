from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.core.dependencies import get_db, get_current_admin
from app.schemas import car_schema
from app.services import admin_service

router = APIRouter(
    prefix="/admin",
    tags=["Moderação"],
    dependencies=[Depends(get_current_admin)],
)


@router.put("/users/{user_id}/block", status_code=status.HTTP_204_NO_CONTENT)
def block_user(
    user_id: int,
    block: bool = True,
    db: Session = Depends(get_db),
):
    admin_service.block_user(db, user_id, block)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(
    "/cars/{car_id}/active",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Ativa ou desativa um anúncio"
)
def set_car_active(
    car_id: int,
    active: bool = True,
    db: Session = Depends(get_db),
):
    """
    Retira um anúncio do ar (active=false) ou o reativa (active=true),
    independente do dono.
    """
    admin_service.set_car_active(db, car_id, active)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/cars", response_model=List[car_schema.CarAdminOut])
def list_cars(
    active: Optional[bool] = None,
    db: Session = Depends(get_db),
):
    return admin_service.list_all_cars(db, active)
