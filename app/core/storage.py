"""
Armazenamento das imagens dos anúncios em disco

Layout: {UPLOADS_DIR}/cars/{car_id}/{token}{ext}, servido em /uploads/cars/...
"""
import logging
import os
import re
import uuid
from typing import Optional

import aiofiles
from fastapi import HTTPException

from app.core.config import settings

logger = logging.getLogger(__name__)

URL_PREFIX = "/uploads"
ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp"}
DEFAULT_EXTENSION = ".jpg"


def cars_root() -> str:
    return os.path.join(settings.UPLOADS_DIR, "cars")


def car_dir(car_id: int) -> str:
    return os.path.join(cars_root(), str(car_id))


def normalize_extension(filename: Optional[str]) -> str:
    ext = os.path.splitext(filename or "")[1].strip().lower()
    return ext or DEFAULT_EXTENSION


def new_filename(ext: str) -> str:
    return f"{uuid.uuid4().hex}{ext}"


def public_url(car_id: int, filename: str) -> str:
    return f"{URL_PREFIX}/cars/{car_id}/{filename}"


def path_for_url(url: str) -> str:
    relative = url[len(URL_PREFIX):].lstrip("/") if url.startswith(URL_PREFIX) else url.lstrip("/")
    return os.path.join(settings.UPLOADS_DIR, *relative.split("/"))


def validar_filename(filename: str) -> str:
    """
    Sanitiza o nome de arquivo recebido na URL

    Remove componentes de caminho e caracteres fora de [A-Za-z0-9._-].
    """
    if "\\" in filename:
        raise HTTPException(status_code=400, detail="Invalid filename")
    name = os.path.basename(filename)
    name = re.sub(r"[^A-Za-z0-9._-]", "", name)
    if not name or name.startswith(".") or ".." in name:
        raise HTTPException(status_code=400, detail="Invalid filename")
    return name


async def save(car_id: int, filename: str, content: bytes) -> str:
    """Grava o arquivo e retorna a URL pública."""
    directory = car_dir(car_id)
    os.makedirs(directory, exist_ok=True)
    async with aiofiles.open(os.path.join(directory, filename), "wb") as out:
        await out.write(content)
    return public_url(car_id, filename)


def remove(url: str) -> None:
    # arquivo ausente não é erro
    path = path_for_url(url)
    try:
        os.remove(path)
    except FileNotFoundError:
        logger.debug(f"Arquivo já removido: {path}")
