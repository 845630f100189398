from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from pelangi_backend.permissions.roles import Role


class LoginRequest(BaseModel):
    email: str = Field(min_length=3, max_length=320, description="Account email")
    password: str = Field(min_length=1, description="Account password")


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class PrincipalGet(BaseModel):
    user_id: str
    role: Role
    full_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)
