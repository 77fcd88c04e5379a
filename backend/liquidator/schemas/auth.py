"""Auth Schemas — request bodies for register, login, resend, and verify.

Invariants:
    - Field presence/type checked here (missing field → 400 via RequestValidationError)
    - Domain rules (permitted domain, blank name/password) are checked by the service,
      so their messages stay specific

Design Decisions:
    - camelCase aliases match the web client's JSON; populate_by_name keeps tests readable
"""

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(max_length=320)
    password: str = Field(max_length=1024)
    full_name: str = Field(alias="fullName", max_length=200)


class LoginRequest(BaseModel):
    email: str = Field(max_length=320)
    password: str = Field(max_length=1024)


class ResendRequest(BaseModel):
    email: str = Field(max_length=320)


class VerifyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(max_length=320)
    verification_code: str = Field(alias="verificationCode", min_length=1, max_length=12)
