# storefront/core/security.py
# Функции для хеширования паролей и работы с JWT.
from dataclasses import dataclass
from datetime import datetime, timedelta

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt, JWTError
from passlib.context import CryptContext

from storefront.core.config import Settings

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class TokenClaims:
    """Раскодированные claims токена администратора."""

    id: str
    username: str
    exp: int


def make_password_context(rounds: int = 10) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def get_password_hash(pwd_context: CryptContext, password: str) -> str:
    """Хешируем пароль для хранения в БД."""
    return pwd_context.hash(password)


def verify_password(pwd_context: CryptContext, plain_password: str, hashed_password: str) -> bool:
    """Проверяем пароль при логине."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    settings: Settings,
    admin_id: str,
    username: str,
    expires_delta: timedelta | None = None,
) -> str:
    """Создаём JWT токен с claims {id, username, exp}."""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    expire = datetime.utcnow() + expires_delta
    to_encode = {"id": str(admin_id), "username": username, "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(settings: Settings, token: str) -> TokenClaims:
    """Проверяет подпись и срок действия; JWTError при любой проблеме."""
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    admin_id = payload.get("id")
    username = payload.get("username")
    exp = payload.get("exp")
    if admin_id is None or username is None or exp is None:
        raise JWTError("Token is missing required claims")
    return TokenClaims(id=admin_id, username=username, exp=exp)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_pwd_context(request: Request) -> CryptContext:
    return request.app.state.pwd_context


def get_current_admin(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> TokenClaims:
    """Возвращает claims администратора по bearer-токену или бросает 401."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token provided",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return decode_access_token(settings, credentials.credentials)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )
