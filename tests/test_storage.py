"""
Testes para o armazenamento de imagens e sanitização de nomes
"""
import os

import pytest
from fastapi import HTTPException

from app.core import storage
from app.core.config import settings


class TestValidarFilename:

    def test_safe(self):
        assert storage.validar_filename("imagem.jpg") == "imagem.jpg"

    def test_path_traversal(self):
        safe_name = storage.validar_filename("../../../etc/passwd")
        assert safe_name == "passwd"

    def test_special_chars_removed(self):
        safe_name = storage.validar_filename("imagem@#$%test.jpg")
        assert safe_name == "imagemtest.jpg"

    def test_backslash_rejected(self):
        with pytest.raises(HTTPException) as exc_info:
            storage.validar_filename("path\\to\\file.jpg")
        assert exc_info.value.status_code == 400

    def test_empty_after_sanitization(self):
        with pytest.raises(HTTPException):
            storage.validar_filename("@@@###")


class TestExtension:

    @pytest.mark.parametrize("filename,expected", [
        ("photo.JPG", ".jpg"),
        ("photo.webp", ".webp"),
        ("photo", ".jpg"),
        (None, ".jpg"),
        ("archive.tar.gz", ".gz"),
    ])
    def test_normalize_extension(self, filename, expected):
        assert storage.normalize_extension(filename) == expected


def test_public_url_layout():
    assert storage.public_url(7, "abc.png") == "/uploads/cars/7/abc.png"
    assert storage.path_for_url("/uploads/cars/7/abc.png") == os.path.join(
        settings.UPLOADS_DIR, "cars", "7", "abc.png"
    )


def test_new_filename_is_unique():
    names = {storage.new_filename(".png") for _ in range(50)}
    assert len(names) == 50
    assert all(name.endswith(".png") for name in names)


@pytest.mark.asyncio
async def test_save_and_remove():
    url = await storage.save(3, "file.png", b"data")
    path = storage.path_for_url(url)
    assert os.path.isfile(path)

    storage.remove(url)
    assert not os.path.exists(path)
    # segunda remoção não é erro
    storage.remove(url)
