from pydantic import BaseModel
from typing import Optional


class TokenData(BaseModel):
    sub: str
    username: Optional[str] = None


class AccessTokenData(BaseModel):
    sub: Optional[str] = None
    client_id: Optional[str] = None
    scope: Optional[str] = None
