"""Registration, login and token response schemas.

Wire names are camelCase (``confirmPassword``, ``accessToken``).
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LoginUser(CamelModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=100)


class RegisterUser(LoginUser):
    confirm_password: str

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, value: str, info: ValidationInfo) -> str:
        if "password" in info.data and value != info.data["password"]:
            raise ValueError("The passwords do not match")
        return value


class UserClaim(CamelModel):
    value: str
    type: str


class UserToken(CamelModel):
    id: str
    email: str
    claims: list[UserClaim] = []


class UserResponse(CamelModel):
    access_token: str
    expires_in: float
    user_token: UserToken
