"""
Autenticación HTTP Basic para las búsquedas OSINT.

Solo existe un par de credenciales configurado por entorno. La contraseña
se guarda hasheada con passlib y se verifica contra ese hash; el usuario
se compara en tiempo constante.
"""

import secrets

from fastapi import HTTPException, status
from fastapi.security import HTTPBasicCredentials
from passlib.context import CryptContext

from .config import AppSettings


REALM = 'Basic realm="Footprint-X"'

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def get_password_hash(password: str) -> str:
    """Genera el hash de una contraseña."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verifica que una contraseña en texto claro coincide con su hash."""
    return pwd_context.verify(plain_password, hashed_password)


class BasicCredentialChecker:
    """Valida cabeceras Basic contra el único usuario configurado."""

    def __init__(self, username: str, password: str) -> None:
        self.username = username
        self.password_hash = get_password_hash(password)

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "BasicCredentialChecker":
        return cls(settings.lookup_username, settings.lookup_password)

    def is_valid(self, username: str, password: str) -> bool:
        username_ok = secrets.compare_digest(username.encode(), self.username.encode())
        password_ok = verify_password(password, self.password_hash)
        return username_ok and password_ok

    def __call__(self, credentials: HTTPBasicCredentials | None) -> str:
        if credentials is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Authentication required",
                headers={"WWW-Authenticate": REALM},
            )
        if not self.is_valid(credentials.username, credentials.password):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid credentials",
                headers={"WWW-Authenticate": REALM},
            )
        return credentials.username
