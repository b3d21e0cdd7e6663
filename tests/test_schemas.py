"""
Testes para schemas e paginação
"""
import pytest
from pydantic import ValidationError

from app.schemas import car_schema, user_schema
from app.schemas.pagination_schema import PaginatedResponse, clamp_pagination


class TestUserSchemas:

    def test_register_invalid_email(self):
        with pytest.raises(ValidationError):
            user_schema.RegisterRequest(username="alice", email="invalid_email", password="x")

    def test_register_missing_password(self):
        with pytest.raises(ValidationError):
            user_schema.RegisterRequest(username="alice", email="alice@example.com")


class TestCarSchemas:

    def test_missing_fields_default_to_none(self):
        car_in = car_schema.CarIn()
        assert car_in.title is None
        assert car_in.features is None

    def test_year_must_be_integer(self):
        with pytest.raises(ValidationError):
            car_schema.CarIn(year="two thousand")

    def test_reorder_defaults_to_empty(self):
        assert car_schema.ReorderImages().image_ids == []


class TestPagination:

    @pytest.mark.parametrize("page,page_size,expected", [
        (1, 10, (1, 10)),
        (0, 10, (1, 10)),
        (5, 0, (5, 20)),
        (5, -1, (5, 20)),
        (5, 100, (5, 100)),
        (5, 101, (5, 20)),
    ])
    def test_clamp(self, page, page_size, expected):
        assert clamp_pagination(page, page_size) == expected

    def test_total_pages(self):
        response = PaginatedResponse[int].create(items=[1, 2], total=5, page=1, page_size=2)
        assert response.total_pages == 3

    def test_total_pages_empty(self):
        response = PaginatedResponse[int].create(items=[], total=0, page=1, page_size=20)
        assert response.total_pages == 0
