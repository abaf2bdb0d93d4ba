"""
Authentication Service.

Account operations for House Life Notes: sign in, sign up, sign out,
password reset and change, and account deletion.  Authentication itself
is hosted; this service validates input at the form boundary, calls the
hosted auth API, keeps ``SessionManager`` in step (refreshing stale
tokens before account changes), and classifies failures.

All methods return typed ``AuthResult`` or ``ValidationResult`` models;
callers never inspect raw exceptions.
"""

from __future__ import annotations

import re
from typing import Optional

from house_notes.auth import SessionManager, SessionTokens
from house_notes.database import DatabaseManager
from house_notes.logger import StructuredLogger
from house_notes.models.auth_models import (
    SUPABASE_ERROR_MAP,
    AuthErrorCode,
    AuthResult,
    ValidationResult,
)
from house_notes.models.user import User
from house_notes.utils.audit import log_audit_event


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_EMAIL_RE: re.Pattern[str] = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)+$"
)

_SPECIAL_CHAR_RE: re.Pattern[str] = re.compile(r"[!@#$%^&*(),.?\":{}|<>_\-+=\[\]\\/]")

DELETE_CONFIRMATION_WORD: str = "DELETE"

_NETWORK_MESSAGE: str = "Cannot reach the server. Check your internet connection."
_PASSWORD_POLICY_MESSAGE: str = "Password does not meet requirements"


class AuthService:
    """Single orchestrator for account concerns.

    Parameters
    ----------
    db:
        Provides the hosted client (``db.supabase``).
    session:
        Shared session holder updated on sign-in and cleared on sign-out.
    logger:
        Structured logger instance.
    min_password_length:
        Minimum accepted password length.
    """

    def __init__(
        self,
        db: DatabaseManager,
        session: SessionManager,
        logger: StructuredLogger,
        min_password_length: int = 6,
    ) -> None:
        self._db: DatabaseManager = db
        self._session: SessionManager = session
        self._logger: StructuredLogger = logger
        self._min_password_length: int = min_password_length

    # ==================================================================
    # Validation helpers
    # ==================================================================

    @staticmethod
    def validate_email(email: str) -> ValidationResult:
        """Validate an email address against a simplified RFC 5322 regex."""
        if not email or not email.strip():
            return ValidationResult(
                is_valid=False,
                error_message="Email address is required.",
            )
        if not _EMAIL_RE.match(email.strip()):
            return ValidationResult(
                is_valid=False,
                error_message="Please enter a valid email address.",
            )
        return ValidationResult(is_valid=True)

    def validate_password(self, password: str) -> ValidationResult:
        """Enforce the password policy.

        Policy: at least ``min_password_length`` characters and at least
        one special character.
        """
        if len(password or "") < self._min_password_length:
            return ValidationResult(
                is_valid=False,
                error_message=_PASSWORD_POLICY_MESSAGE,
            )
        if not _SPECIAL_CHAR_RE.search(password):
            return ValidationResult(
                is_valid=False,
                error_message=_PASSWORD_POLICY_MESSAGE,
            )
        return ValidationResult(is_valid=True)

    @staticmethod
    def normalize_email(email: str) -> str:
        return email.strip().lower()

    # ==================================================================
    # Sign in / sign up / sign out
    # ==================================================================

    def login(self, email: str, password: str) -> AuthResult:
        """Authenticate via the hosted auth service and start a session."""
        email = self.normalize_email(email)
        try:
            response = self._db.supabase.auth.sign_in_with_password({
                "email": email,
                "password": password,
            })
            user_data = response.user
            session_data = response.session
            metadata = getattr(user_data, "user_metadata", None) or {}

            current_user = User(
                id=user_data.id,
                email=user_data.email or email,
                full_name=metadata.get("full_name"),
            )
            self._session.start(
                current_user,
                SessionTokens.from_hosted(session_data) if session_data is not None else None,
            )

            self._logger.info(
                "User authenticated: %s",
                current_user.email,
                extra={
                    "event": "LOGIN",
                    "email": current_user.email,
                    "user_id": current_user.id,
                },
            )
            return AuthResult(
                success=True,
                user_id=current_user.id,
                email=current_user.email,
            )
        except RuntimeError:
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.NETWORK_ERROR,
                error_message=_NETWORK_MESSAGE,
            )
        except Exception as exc:
            return self._classify_error(exc, "LOGIN_FAILED")

    def register(self, email: str, password: str) -> AuthResult:
        """Create an account via ``sign_up`` after client-side checks."""
        email_check = self.validate_email(email)
        if not email_check.is_valid:
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.VALIDATION_ERROR,
                error_message=email_check.error_message,
            )
        pw_check = self.validate_password(password)
        if not pw_check.is_valid:
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.VALIDATION_ERROR,
                error_message="Please meet all password requirements",
            )

        email = self.normalize_email(email)
        try:
            response = self._db.supabase.auth.sign_up({
                "email": email,
                "password": password,
            })
            user_data = getattr(response, "user", None)
            self._logger.info(
                "User registered: %s", email,
                extra={"event": "REGISTER", "email": email},
            )
            return AuthResult(
                success=True,
                email=email,
                user_id=getattr(user_data, "id", None),
            )
        except RuntimeError:
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.NETWORK_ERROR,
                error_message=(
                    "Cannot reach the server. "
                    "An internet connection is required to create an account."
                ),
            )
        except Exception as exc:
            return self._classify_error(exc, "REGISTER_FAILED")

    def logout(self) -> None:
        """Server-side sign-out, then clear the local session.

        A failed server call is logged; the local session is cleared
        regardless.
        """
        user_email = "unknown"
        user_id = "unknown"
        if self._session.is_authenticated:
            user = self._session.get_current_user()
            user_email = user.email
            user_id = user.id

        try:
            self._db.supabase.auth.sign_out()
        except RuntimeError:
            self._logger.debug(
                "Hosted auth not configured; skipping sign_out for %s.", user_email,
            )
        except Exception as exc:
            self._logger.warning(
                "Server-side sign_out failed for %s: %s", user_email, exc,
            )

        self._session.clear()
        self._logger.info(
            "User logged out: %s",
            user_email,
            extra={"event": "LOGOUT", "email": user_email, "user_id": user_id},
        )

    def ensure_fresh_session(self) -> Optional[AuthResult]:
        """Refresh the hosted session when its access token is stale.

        Returns ``None`` when the session can be used as is or was
        refreshed.  A refused refresh token ends the local session.
        """
        tokens = self._session.tokens
        if tokens is None or not self._session.tokens_need_refresh():
            return None
        try:
            response = self._db.supabase.auth.refresh_session(tokens.refresh_token)
        except RuntimeError:
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.NETWORK_ERROR,
                error_message=_NETWORK_MESSAGE,
            )
        except (ConnectionError, TimeoutError) as exc:
            return self._classify_error(exc, "SESSION_REFRESH_FAILED")
        except Exception as exc:
            self._logger.warning(
                "Session refresh refused: %s", exc,
                extra={"event": "SESSION_EXPIRED"},
            )
            self._session.clear()
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.SESSION_EXPIRED,
                error_message="Your session has expired. Please sign in again.",
            )

        if response.session is not None:
            self._session.replace_tokens(SessionTokens.from_hosted(response.session))
        self._logger.debug("Hosted session refreshed.", extra={"event": "SESSION_REFRESH"})
        return None

    # ==================================================================
    # Passwords
    # ==================================================================

    def request_password_reset(self, email: str) -> AuthResult:
        """Send a password-reset email.

        Anti-enumeration: the same success message is returned whether or
        not the address is registered.
        """
        email_check = self.validate_email(email)
        if not email_check.is_valid:
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.VALIDATION_ERROR,
                error_message=email_check.error_message,
            )

        email = self.normalize_email(email)
        try:
            self._db.supabase.auth.reset_password_for_email(email)
            self._logger.info(
                "Password reset requested for %s.", email,
                extra={"event": "PASSWORD_RESET_REQUESTED", "email": email},
            )
        except RuntimeError:
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.NETWORK_ERROR,
                error_message=_NETWORK_MESSAGE,
            )
        except (ConnectionError, TimeoutError):
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.NETWORK_ERROR,
                error_message=_NETWORK_MESSAGE,
            )
        except Exception as exc:
            self._logger.warning("Password reset error for %s: %s", email, exc)

        return AuthResult(
            success=True,
            message=(
                "If this email is registered, you will receive "
                "a password reset link."
            ),
        )

    def change_password(self, new_password: str, confirm_password: str) -> AuthResult:
        """Set a new password for the signed-in user.

        The new password must satisfy the policy and equal its
        confirmation.
        """
        if not self._session.is_authenticated:
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.NOT_AUTHENTICATED,
                error_message="Please sign in again.",
            )
        if not self.validate_password(new_password).is_valid:
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.VALIDATION_ERROR,
                error_message=_PASSWORD_POLICY_MESSAGE,
            )
        if new_password != confirm_password:
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.VALIDATION_ERROR,
                error_message="Passwords do not match",
            )
        refresh_failure = self.ensure_fresh_session()
        if refresh_failure is not None:
            return refresh_failure

        user = self._session.get_current_user()
        try:
            self._db.supabase.auth.update_user({"password": new_password})
        except RuntimeError:
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.NETWORK_ERROR,
                error_message=_NETWORK_MESSAGE,
            )
        except Exception as exc:
            self._logger.warning(
                "Password update failed for %s: %s", user.email, exc,
                extra={"event": "PASSWORD_CHANGE_FAILED", "user_id": user.id},
            )
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.UNKNOWN_ERROR,
                error_message="Failed to update password",
            )

        self._logger.info(
            "Password changed for %s", user.email,
            extra={"event": "PASSWORD_CHANGED", "user_id": user.id},
        )
        return AuthResult(
            success=True, user_id=user.id, email=user.email, message="Changes saved"
        )

    # ==================================================================
    # Account deletion
    # ==================================================================

    def delete_account(self, confirmation: str) -> AuthResult:
        """Delete the signed-in user's account and every record they own.

        *confirmation* must be exactly ``DELETE``.  On success the user is
        signed out and the local session is cleared.
        """
        if confirmation != DELETE_CONFIRMATION_WORD:
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.VALIDATION_ERROR,
                error_message=f"Please type {DELETE_CONFIRMATION_WORD} to confirm",
            )
        if not self._session.is_authenticated:
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.NOT_AUTHENTICATED,
                error_message="No user found",
            )
        refresh_failure = self.ensure_fresh_session()
        if refresh_failure is not None:
            return refresh_failure

        user = self._session.get_current_user()
        try:
            self._db.supabase.rpc("delete_user_account", {}).execute()
        except RuntimeError:
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.NETWORK_ERROR,
                error_message=_NETWORK_MESSAGE,
            )
        except Exception as exc:
            self._logger.error(
                "Account deletion failed for %s: %s", user.email, exc,
                exc_info=True,
                extra={"event": "ACCOUNT_DELETE_FAILED", "user_id": user.id},
            )
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.UNKNOWN_ERROR,
                error_message="Failed to delete account",
            )

        with self._db.write_lock:
            log_audit_event(
                logger=self._logger,
                action="ACCOUNT_DELETE",
                entity_type="users",
                entity_id=user.id,
                user_id=user.id,
                details={"email": user.email},
                conn=self._db.sqlite,
            )
        self.logout()
        return AuthResult(success=True, user_id=user.id, email=user.email)

    # ==================================================================
    # Error classification
    # ==================================================================

    def _classify_error(self, exc: Exception, event: str) -> AuthResult:
        """Map a hosted auth or network exception to an ``AuthResult``."""
        if isinstance(exc, (ConnectionError, TimeoutError)):
            self._logger.warning(
                "Network error during auth: %s", exc,
                extra={"event": event, "error_code": "network"},
            )
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.NETWORK_ERROR,
                error_message=_NETWORK_MESSAGE,
            )

        error_str = " ".join(
            str(part).lower()
            for part in (getattr(exc, "code", None), exc)
            if part is not None
        )
        for code_key, (error_code, human_message) in SUPABASE_ERROR_MAP.items():
            if code_key in error_str:
                self._logger.warning(
                    "Auth error (%s): %s", code_key, exc,
                    extra={"event": event, "error_code": code_key},
                )
                return AuthResult(
                    success=False,
                    error_code=error_code,
                    error_message=human_message,
                )

        self._logger.warning(
            "Unknown auth error: %s", exc,
            extra={"event": event, "error_code": "unknown"},
        )
        return AuthResult(
            success=False,
            error_code=AuthErrorCode.UNKNOWN_ERROR,
            error_message="An unexpected error occurred",
        )

    @property
    def current_user(self) -> Optional[User]:
        """The signed-in user, or ``None``."""
        if not self._session.is_authenticated:
            return None
        return self._session.get_current_user()
