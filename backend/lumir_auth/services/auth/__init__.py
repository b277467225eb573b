from lumir_auth.services.auth.credentials import CredentialValidator
from lumir_auth.services.auth.dto import (
    AuthTokenConfig,
    SessionTokensIn,
    SignInIn,
    SignUpIn,
    TokenPairOut,
)
from lumir_auth.services.auth.password_policy import (
    check_password_strength,
    exceeds_byte_limit,
)
from lumir_auth.services.auth.service import AuthService
from lumir_auth.services.auth.sessions import AccessTokenBlacklist, RefreshTokenRegistry

__all__ = [
    "AuthService",
    "AuthTokenConfig",
    "CredentialValidator",
    "SessionTokensIn",
    "SignInIn",
    "SignUpIn",
    "TokenPairOut",
    "AccessTokenBlacklist",
    "RefreshTokenRegistry",
    "check_password_strength",
    "exceeds_byte_limit",
]
