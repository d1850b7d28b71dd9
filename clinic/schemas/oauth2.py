from enum import Enum

from pydantic import BaseModel, UUID4


class TokenType(str, Enum):
    access_token = "access"


class TokenPayloadBase(BaseModel):
    user_id: UUID4
    role: str
    token_type: TokenType = TokenType.access_token


class Identity(BaseModel):
    id: UUID4
    role: str
