"""API schemas for auth endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class SessionTokensRequest(BaseModel):
    """Tokens obtained by a client-side OAuth flow."""

    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(..., min_length=1, alias="accessToken")
    refresh_token: str = Field(..., min_length=1, alias="refreshToken")
    expires_in: int = Field(..., gt=0, alias="expiresIn", description="Seconds")


class AuthStatusResponse(BaseModel):
    authenticated: bool


class SuccessResponse(BaseModel):
    success: bool = True
