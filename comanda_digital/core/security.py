import hmac
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from comanda_digital.core.config import settings
from comanda_digital.core.exceptions import AuthError, InternalError

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Generate a password hash."""
    return pwd_context.hash(password)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Cria um token JWT de acesso para a equipe."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta if expires_delta else timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """Decode a JWT token."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.warning(f"Token decode error: {str(e)}")
        raise AuthError("Token inválido")


def check_bearer_secret(authorization: Optional[str], expected: str, name: str) -> None:
    """
    Valida um segredo compartilhado enviado como `Authorization: Bearer <segredo>`.
    Segredo não configurado é erro do servidor; segredo divergente é 401.
    """
    if not expected:
        raise InternalError(f"{name} não configurado")
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthError("Não autorizado")
    if not hmac.compare_digest(authorization[7:], expected):
        raise AuthError("Não autorizado")
