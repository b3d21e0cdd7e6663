from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Numeric, Index
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.models.user_model import utcnow


class Car(Base):
    __tablename__ = "cars"

    id          = Column(Integer, primary_key=True, index=True)
    title       = Column(String, nullable=False)
    brand       = Column(String, nullable=False, index=True)
    model       = Column(String, nullable=False)
    year        = Column(Integer, nullable=False)
    price       = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    user_id     = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    is_active   = Column(Boolean, default=True, nullable=False, index=True)
    created_at  = Column(DateTime, default=utcnow, nullable=False)

    # Índice composto para a listagem pública (ativos, mais recentes primeiro)
    __table_args__ = (
        Index("idx_cars_active_created", "is_active", "created_at"),
    )

    owner       = relationship("User")
    images      = relationship(
        "CarImage",
        back_populates="car",
        order_by="CarImage.order",
        cascade="all, delete-orphan",
    )
    features    = relationship(
        "CarFeature",
        back_populates="car",
        cascade="all, delete-orphan",
    )


class CarImage(Base):
    __tablename__ = "car_images"

    id         = Column(Integer, primary_key=True, index=True)
    car_id     = Column(Integer, ForeignKey("cars.id", ondelete="CASCADE"), nullable=False, index=True)
    image_url  = Column(String, unique=True, nullable=False)
    is_main    = Column(Boolean, default=False, nullable=False)
    order      = Column(Integer, default=0, nullable=False)

    car        = relationship("Car", back_populates="images")


class CarFeature(Base):
    __tablename__ = "car_features"

    id         = Column(Integer, primary_key=True, index=True)
    car_id     = Column(Integer, ForeignKey("cars.id", ondelete="CASCADE"), nullable=False, index=True)
    key        = Column(String, nullable=False)
    value      = Column(String, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    car        = relationship("Car", back_populates="features")
