"""
Authentication module.

Handles credentials, token issuance/verification and the request gate.

Public API:
- IAuthService: Interface for account and session flows
- AuthService: Implementation
- CredentialStore, TokenService, AuthGate: Core components
- Principal, TokenClaims, AuthResult: Models
- Auth exceptions: InvalidCredentialsError, ExpiredTokenError, etc.
"""

from .interfaces import (
    IAuthService,
    ICredentialStore,
    IPrincipalRepository,
    ITokenService,
)
from .models import AuthResult, IssuedToken, Principal, StoredCredential, TokenClaims
from .exceptions import (
    BadSignatureError,
    DuplicateEmailError,
    DuplicateUsernameError,
    ExpiredTokenError,
    InactivePrincipalError,
    InvalidCredentialsError,
    InvalidEmailError,
    InvalidTokenError,
    MalformedTokenError,
    MissingTokenError,
    PrincipalNotFoundError,
    RevokedSessionError,
    WeakPasswordError,
)
from .passwords import PasswordHasher
from .tokens import TokenService
from .credentials import CredentialStore, normalize_email
from .repository import InMemoryPrincipalRepository, SupabasePrincipalRepository
from .gate import AuthGate, GateRejection, GateState
from .service import AuthService

__all__ = [
    # Interfaces
    "IAuthService",
    "ICredentialStore",
    "IPrincipalRepository",
    "ITokenService",
    # Models
    "AuthResult",
    "IssuedToken",
    "Principal",
    "StoredCredential",
    "TokenClaims",
    # Exceptions
    "BadSignatureError",
    "DuplicateEmailError",
    "DuplicateUsernameError",
    "ExpiredTokenError",
    "InactivePrincipalError",
    "InvalidCredentialsError",
    "InvalidEmailError",
    "InvalidTokenError",
    "MalformedTokenError",
    "MissingTokenError",
    "PrincipalNotFoundError",
    "RevokedSessionError",
    "WeakPasswordError",
    # Implementations
    "PasswordHasher",
    "TokenService",
    "CredentialStore",
    "normalize_email",
    "InMemoryPrincipalRepository",
    "SupabasePrincipalRepository",
    "AuthGate",
    "GateRejection",
    "GateState",
    "AuthService",
]
