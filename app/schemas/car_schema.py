from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CarFeatureIn(BaseModel):
    key: Optional[str] = None
    value: Optional[str] = None


class CarFeatureOut(BaseModel):
    id: int
    key: str
    value: str

    model_config = ConfigDict(from_attributes=True)


class CarImageOut(BaseModel):
    id: int
    image_url: str
    is_main: bool
    order: int

    model_config = ConfigDict(from_attributes=True)


class CarIn(BaseModel):
    """
    Dados de criação/atualização de anúncio

    Campos ausentes chegam como None e são recusados pela validação do
    service, que devolve o primeiro campo inválido.
    """
    title: Optional[str] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    price: Optional[float] = None
    features: Optional[List[CarFeatureIn]] = None


class CarCreated(BaseModel):
    id: int


class CarOut(BaseModel):
    id: int
    title: str
    brand: str
    model: str
    year: int
    price: float
    user_id: int
    created_at: datetime
    images: List[CarImageOut] = []
    features: List[CarFeatureOut] = []

    model_config = ConfigDict(from_attributes=True)


class CarAdminOut(BaseModel):
    id: int
    title: str
    brand: str
    model: str
    year: int
    price: float
    user_id: int
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ImagesOut(BaseModel):
    car_id: int
    images: List[CarImageOut]


class ReorderImages(BaseModel):
    image_ids: List[int] = Field(default_factory=list)
