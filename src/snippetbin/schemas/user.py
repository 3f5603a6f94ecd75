"""User-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field


class SignupRequest(BaseModel):
    """Schema for account registration."""

    username: str = Field(..., max_length=64, description="Unique, case-insensitive username")
    password: str = Field(..., description="Plaintext password")


class LoginRequest(BaseModel):
    """Schema for login submissions."""

    username: str = Field(..., description="Username in any letter case")
    password: str = Field(..., description="Plaintext password")
    code: str | None = Field(None, description="TOTP code when the second factor is enabled")


class UserOut(BaseModel):
    """Public identity returned by signup and login."""

    id: str
    username: str
    role: str

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    """Response returned after a successful signup or login."""

    message: str
    user: UserOut


class UserSummary(UserOut):
    """Account listing entry without credential material."""

    created_at: str


class UserListResponse(BaseModel):
    users: list[UserSummary]


class SecondFactorRequest(BaseModel):
    """Request to enable TOTP for an account."""

    username: str
    password: str


class SecondFactorResponse(BaseModel):
    """TOTP enrolment material for an authenticator app."""

    secret: str
    provisioning_uri: str


class ProfileOut(BaseModel):
    """Profile information; accounts without a stored profile get the defaults."""

    user_id: str
    bio: str | None = None
    avatar_url: str | None = None
    theme: str = "dark"
    last_seen: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdateRequest(BaseModel):
    """Schema for updating user profile information."""

    bio: str | None = Field(None, max_length=500)
    avatar_url: str | None = Field(None, max_length=500)
    theme: str | None = Field(None, max_length=32)
