"""
Authentication service

Wraps the remote auth provider, keeps the explicit SessionContext up to
date and mirrors the signed-in user and profile into local storage.
"""

import json
import logging
from typing import Any, Dict, Mapping, Optional, Union

import httpx
from email_validator import EmailNotValidError, validate_email

from storefront.core.config import settings
from storefront.core.exceptions import AuthProviderError, StorageError
from storefront.core.session import SessionContext
from storefront.core.storage import KeyValueStorage
from storefront.schemas.auth import SessionUser, SignUpProfile
from storefront.services.user_service import UserService
from storefront.utils.helpers import utc_now_iso

logger = logging.getLogger(__name__)

ERROR_MESSAGES = {
    "auth/email-already-in-use": "This email is already registered. Please sign in instead.",
    "auth/invalid-email": "Invalid email address.",
    "auth/operation-not-allowed": "Email/password accounts are not enabled. Please contact support.",
    "auth/weak-password": "Password should be at least 6 characters.",
    "auth/user-disabled": "This account has been disabled.",
    "auth/user-not-found": "No account found with this email.",
    "auth/wrong-password": "Incorrect password. Please try again.",
    "auth/invalid-credential": "Incorrect email or password.",
    "auth/too-many-requests": "Too many failed attempts. Please try again later.",
    "auth/network-request-failed": "Network error. Please check your connection.",
}

# Identity Toolkit error identifiers
REST_ERROR_CODES = {
    "EMAIL_EXISTS": "auth/email-already-in-use",
    "INVALID_EMAIL": "auth/invalid-email",
    "OPERATION_NOT_ALLOWED": "auth/operation-not-allowed",
    "WEAK_PASSWORD": "auth/weak-password",
    "USER_DISABLED": "auth/user-disabled",
    "EMAIL_NOT_FOUND": "auth/user-not-found",
    "INVALID_PASSWORD": "auth/wrong-password",
    "INVALID_LOGIN_CREDENTIALS": "auth/invalid-credential",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "auth/too-many-requests",
}

# sign-out tears the session down; callers start a new SessionContext
SESSION_CLOSED_MESSAGE = "This session has ended. Please start a new session to sign in."

def get_error_message(code: str) -> str:
    """Human-readable message for an ``auth/...`` code"""
    if code in ERROR_MESSAGES:
        return ERROR_MESSAGES[code]
    return code.replace("auth/", "").replace("-", " ")


class AuthProvider:
    """Remote credential verification"""

    async def create_account(self, email: str, password: str) -> SessionUser:
        raise NotImplementedError

    async def sign_in(self, email: str, password: str) -> SessionUser:
        raise NotImplementedError

    async def update_profile(self, user: SessionUser, display_name: str) -> SessionUser:
        raise NotImplementedError

    async def send_password_reset(self, email: str) -> None:
        raise NotImplementedError


class FirebaseAuthProvider(AuthProvider):
    """Firebase Authentication through the Identity Toolkit REST API"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.api_key = api_key or settings.FIREBASE_WEB_API_KEY
        self.base_url = (base_url or settings.IDENTITY_TOOLKIT_URL).rstrip("/")
        self.client = client or httpx.AsyncClient(timeout=10.0)

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _call(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = await self.client.post(
                f"{self.base_url}/accounts:{endpoint}",
                params={"key": self.api_key},
                json=payload
            )
        except httpx.RequestError as e:
            raise AuthProviderError("auth/network-request-failed", str(e)) from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.is_error:
            message = data.get("error", {}).get("message", "") or response.reason_phrase
            # e.g. "WEAK_PASSWORD : Password should be at least 6 characters"
            identifier = message.split(" ")[0]
            code = REST_ERROR_CODES.get(
                identifier,
                "auth/" + identifier.lower().replace("_", "-")
            )
            raise AuthProviderError(code, message)

        return data

    async def _lookup(self, id_token: str, refresh_token: Optional[str]) -> SessionUser:
        data = await self._call("lookup", {"idToken": id_token})
        account = data["users"][0]
        return SessionUser(
            uid=account["localId"],
            email=account.get("email", ""),
            display_name=account.get("displayName"),
            email_verified=account.get("emailVerified", False),
            id_token=id_token,
            refresh_token=refresh_token
        )

    async def create_account(self, email: str, password: str) -> SessionUser:
        data = await self._call("signUp", {
            "email": email,
            "password": password,
            "returnSecureToken": True
        })
        return SessionUser(
            uid=data["localId"],
            email=data.get("email", email),
            id_token=data.get("idToken"),
            refresh_token=data.get("refreshToken")
        )

    async def sign_in(self, email: str, password: str) -> SessionUser:
        data = await self._call("signInWithPassword", {
            "email": email,
            "password": password,
            "returnSecureToken": True
        })
        return await self._lookup(data["idToken"], data.get("refreshToken"))

    async def update_profile(self, user: SessionUser, display_name: str) -> SessionUser:
        data = await self._call("update", {
            "idToken": user.id_token,
            "displayName": display_name,
            "returnSecureToken": True
        })
        return user.model_copy(update={
            "display_name": data.get("displayName", display_name),
            "id_token": data.get("idToken", user.id_token),
            "refresh_token": data.get("refreshToken", user.refresh_token),
        })

    async def send_password_reset(self, email: str) -> None:
        await self._call("sendOobCode", {"requestType": "PASSWORD_RESET", "email": email})


class AuthService:
    """Sign-up, sign-in and sign-out against the auth provider"""

    def __init__(
        self,
        provider: AuthProvider,
        users: UserService,
        storage: KeyValueStorage
    ):
        self.provider = provider
        self.users = users
        self.storage = storage

    async def sign_up(
        self,
        session: SessionContext,
        email: str,
        password: str,
        profile: Union[SignUpProfile, Mapping[str, Any], None] = None
    ) -> Dict[str, Any]:
        """
        Create the account, set its display name and store the profile
        """
        if session.closed:
            return {"success": False, "error": SESSION_CLOSED_MESSAGE}

        try:
            email = validate_email(email, check_deliverability=False).normalized
        except EmailNotValidError:
            return {"success": False, "error": get_error_message("auth/invalid-email")}

        if profile is None:
            profile = SignUpProfile()
        elif not isinstance(profile, SignUpProfile):
            profile = SignUpProfile.model_validate(dict(profile))

        try:
            user = await self.provider.create_account(email, password)
            if profile.fullName:
                user = await self.provider.update_profile(user, profile.fullName)
        except AuthProviderError as e:
            logger.error(f"Sign up error: {e}")
            return {"success": False, "error": get_error_message(e.code)}

        await self.users.save_user_profile(user.uid, {
            **profile.model_dump(exclude_none=True),
            "email": email,
            "createdAt": utc_now_iso(),
            "emailVerified": user.email_verified,
        })

        await self._start_session(session, user)
        return {"success": True, "user": user}

    async def sign_in(self, session: SessionContext, email: str, password: str) -> Dict[str, Any]:
        if session.closed:
            return {"success": False, "error": SESSION_CLOSED_MESSAGE}

        try:
            user = await self.provider.sign_in(email, password)
        except AuthProviderError as e:
            logger.error(f"Sign in error: {e}")
            return {"success": False, "error": get_error_message(e.code)}

        await self._start_session(session, user)
        return {"success": True, "user": user}

    async def sign_out(self, session: SessionContext) -> Dict[str, Any]:
        """Tear the session down and forget the cached user"""
        session.teardown()
        try:
            self.storage.remove(settings.USER_STORAGE_KEY)
            self.storage.remove(settings.PROFILE_STORAGE_KEY)
        except StorageError as e:
            logger.error(f"Sign out error: {e}")
            return {"success": False, "error": str(e)}
        return {"success": True}

    async def send_password_reset(self, email: str) -> Dict[str, Any]:
        try:
            await self.provider.send_password_reset(email)
        except AuthProviderError as e:
            logger.error(f"Password reset error: {e}")
            return {"success": False, "error": get_error_message(e.code)}
        return {"success": True}

    @staticmethod
    def current_user(session: SessionContext) -> Optional[SessionUser]:
        return session.user

    @staticmethod
    def is_authenticated(session: SessionContext) -> bool:
        return session.is_authenticated

    def require_auth(self, session: SessionContext, current_path: str) -> bool:
        """
        False when nobody is signed in; the path is kept for after login
        """
        if session.is_authenticated:
            return True
        try:
            self.storage.set(settings.REDIRECT_STORAGE_KEY, current_path)
        except StorageError as e:
            logger.warning(f"Could not remember redirect path: {e}")
        return False

    async def _start_session(self, session: SessionContext, user: SessionUser) -> None:
        session.set_user(user)

        try:
            self.storage.set(settings.USER_STORAGE_KEY, json.dumps(user.storage_mirror()))
        except StorageError as e:
            logger.warning(f"Could not cache signed-in user: {e}")

        result = await self.users.get_user_profile(user.uid)
        if result["success"]:
            try:
                self.storage.set(settings.PROFILE_STORAGE_KEY, json.dumps(result["data"], default=str))
            except StorageError as e:
                logger.warning(f"Could not cache user profile: {e}")
