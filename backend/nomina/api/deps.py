from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from nomina.core.database import get_db
from nomina.core.security import decode_token

security = HTTPBearer()

ROLES = ("admin", "manager", "member")


@dataclass(frozen=True)
class Principal:
    """Usuario del token. El login vive en otro servicio; acá no hay tabla de usuarios."""
    name: str
    role: str


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
) -> Principal:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="No se pudieron validar las credenciales",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_token(credentials.credentials)
        if payload.get("type") != "access":
            raise credentials_exception
        name = str(payload["sub"])
        role = payload.get("role", "member")
    except (ValueError, KeyError):
        raise credentials_exception

    if not name or role not in ROLES:
        raise credentials_exception
    return Principal(name=name, role=role)


async def get_current_manager_or_admin(
    current_user: Annotated[Principal, Depends(get_current_user)],
) -> Principal:
    if current_user.role not in ("admin", "manager"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Permisos insuficientes: se requiere admin o encargado",
        )
    return current_user


CurrentUser = Annotated[Principal, Depends(get_current_user)]
ManagerOrAdmin = Annotated[Principal, Depends(get_current_manager_or_admin)]
DB = Annotated[AsyncSession, Depends(get_db)]
