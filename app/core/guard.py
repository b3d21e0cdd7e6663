"""
Guarda de propriedade e moderação

Única regra de autorização para operações que alteram anúncios e imagens:
- Admin pode tudo (ignora bloqueio e dono)
- usuário bloqueado não altera nada
- demais usuários só alteram o que é seu
"""
import logging
from typing import Optional

from app.core import exceptions
from app.models import user_model

logger = logging.getLogger(__name__)


def can_mutate(actor: user_model.User, owner_id: Optional[int] = None) -> bool:
    try:
        ensure_can_mutate(actor, owner_id)
    except exceptions.Forbidden:
        return False
    return True


def ensure_can_mutate(actor: user_model.User, owner_id: Optional[int] = None) -> None:
    """
    Levanta Forbidden se `actor` não puder alterar um recurso de `owner_id`.

    Sem `owner_id` (criação, ou checagem antes de carregar o anúncio)
    apenas o bloqueio é verificado.
    """
    if actor.is_admin:
        return
    if actor.is_blocked:
        logger.warning(f"Usuário bloqueado {actor.id} tentou alterar recurso")
        raise exceptions.Forbidden("You are blocked", reason="blocked")
    if owner_id is not None and owner_id != actor.id:
        logger.warning(f"Usuário {actor.id} tentou alterar recurso do usuário {owner_id}")
        raise exceptions.Forbidden("You are not the owner of this listing", reason="not-owner")
