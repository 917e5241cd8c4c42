from pydantic import BaseModel

from cinestream.models.base import CamelModel
from cinestream.models.user import Email, PlainPassword


class ForgotPasswordPayload(CamelModel):
    email: Email


class ResetPasswordPayload(CamelModel):
    """Body of ``POST /password/reset-password/{token}`` (``{"newPassword": ...}``)."""

    new_password: PlainPassword


class TokenCheckResponse(BaseModel):
    valid: bool = True
