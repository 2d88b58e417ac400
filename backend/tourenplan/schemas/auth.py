"""Login request and token response bodies."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str
    password: str


class TokenResponse(BaseModel):
    token: str = Field(description="Signed bearer token (JWT)")
    token_type: str = Field(default="bearer")
    expires_in: int = Field(description="Seconds until the token expires")
