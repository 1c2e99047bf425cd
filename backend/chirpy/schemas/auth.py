# chirpy/schemas/auth.py
from pydantic import BaseModel, EmailStr

from chirpy.schemas.user import UserOut


class LoginIn(BaseModel):
    email: EmailStr
    password: str


class LoginOut(UserOut):
    token: str
    refresh_token: str


class TokenOut(BaseModel):
    token: str
