from .auth_service import AuthService
from .mailer import SendGridMailer
from .password_reset_service import PasswordResetService

__all__ = ["AuthService", "PasswordResetService", "SendGridMailer"]
