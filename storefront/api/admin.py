# storefront/api/admin.py
# Роуты для регистрации администратора и получения JWT токена.
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from storefront.core import security
from storefront.core.config import Settings
from storefront.core.errors import DuplicateUsernameError
from storefront.db.session import get_db
from storefront.repos.admin_repo import AdminRepo
from storefront.schemas.admin import AdminCredentials, TokenOut
from storefront.schemas.common import MessageOut

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=MessageOut)
def register(
    payload: AdminCredentials,
    db: Session = Depends(get_db),
    settings: Settings = Depends(security.get_settings),
    pwd_context: CryptContext = Depends(security.get_pwd_context),
):
    """
    Регистрация администратора: username + password.
    Сессия не создаётся, для токена нужен отдельный логин.
    """
    if not settings.ALLOW_ADMIN_REGISTRATION:
        raise HTTPException(status_code=403, detail="Admin registration is disabled")
    hashed = security.get_password_hash(pwd_context, payload.password)
    try:
        admin = AdminRepo(db).create(payload.username, hashed)
    except DuplicateUsernameError as e:
        raise HTTPException(status_code=400, detail=str(e))
    logger.info(f"Admin registered: {admin.username} ({admin.id})")
    return {"message": "Admin created successfully"}


@router.post("/login", response_model=TokenOut)
def login(
    payload: AdminCredentials,
    db: Session = Depends(get_db),
    settings: Settings = Depends(security.get_settings),
    pwd_context: CryptContext = Depends(security.get_pwd_context),
):
    """
    Логин: возвращает JWT с claims {id, username, exp}.
    Неизвестный username и неверный пароль дают одинаковый ответ.
    """
    admin = AdminRepo(db).find_by_username(payload.username)
    if not admin or not security.verify_password(pwd_context, payload.password, admin.password_hash):
        logger.warning(f"Failed login attempt for username '{payload.username}'")
        raise HTTPException(status_code=401, detail="Invalid credentials")
    token = security.create_access_token(settings, admin_id=admin.id, username=admin.username)
    logger.info(f"Admin logged in: {admin.username}")
    return {"token": token}
