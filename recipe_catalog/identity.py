"""
Identidad del que llama (principal).

El proveedor de identidad es externo: la API resuelve el token a un usuario
local y arma un `Principal`. El resto del core solo usa `current_user_id`
e `is_admin`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Principal:
    user_id: Optional[str] = None
    is_admin: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @classmethod
    def anonymous(cls) -> "Principal":
        return cls()


def current_user_id(principal: Principal) -> Optional[str]:
    return principal.user_id


def is_admin(principal: Principal) -> bool:
    return principal.is_authenticated and principal.is_admin
