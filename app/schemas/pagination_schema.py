from pydantic import BaseModel
from typing import Generic, TypeVar, List, Tuple

from app.core.config import settings

T = TypeVar('T')


def clamp_pagination(page: int, page_size: int) -> Tuple[int, int]:
    """Corrige valores fora da faixa em vez de recusá-los"""
    if page < 1:
        page = 1
    if page_size <= 0 or page_size > settings.MAX_PAGE_SIZE:
        page_size = settings.DEFAULT_PAGE_SIZE
    return page, page_size


class PaginatedResponse(BaseModel, Generic[T]):
    """Resposta paginada genérica"""
    items: List[T]
    total: int
    page: int
    page_size: int
    total_pages: int

    @classmethod
    def create(cls, items: List[T], total: int, page: int, page_size: int):
        """Cria uma resposta paginada"""
        total_pages = (total + page_size - 1) // page_size if total > 0 else 0
        return cls(
            items=items,
            total=total,
            page=page,
            page_size=page_size,
            total_pages=total_pages
        )
