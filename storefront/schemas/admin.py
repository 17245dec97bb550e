# storefront/schemas/admin.py
from pydantic import BaseModel, Field


class AdminCredentials(BaseModel):
    """Тело запроса регистрации и логина."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenOut(BaseModel):
    token: str
