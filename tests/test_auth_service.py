"""Tests for authentication, session handling and the Identity Toolkit provider."""

import json

import httpx
import pytest

from storefront.core.exceptions import AuthProviderError
from storefront.core.session import SessionContext
from storefront.schemas.auth import SessionUser
from storefront.services.auth_service import (
    AuthProvider,
    AuthService,
    FirebaseAuthProvider,
    SESSION_CLOSED_MESSAGE,
    get_error_message,
)
from storefront.services.user_service import UserService


class FakeAuthProvider(AuthProvider):
    """Provider with a fixed set of accounts."""

    def __init__(self):
        self.accounts = {}
        self.reset_requests = []

    async def create_account(self, email, password):
        if email in self.accounts:
            raise AuthProviderError("auth/email-already-in-use")
        if len(password) < 6:
            raise AuthProviderError("auth/weak-password")
        user = SessionUser(uid=f"uid-{len(self.accounts) + 1}", email=email, id_token="tok")
        self.accounts[email] = (password, user)
        return user

    async def sign_in(self, email, password):
        if email not in self.accounts:
            raise AuthProviderError("auth/user-not-found")
        stored_password, user = self.accounts[email]
        if password != stored_password:
            raise AuthProviderError("auth/wrong-password")
        return user

    async def update_profile(self, user, display_name):
        updated = user.model_copy(update={"display_name": display_name})
        password, _ = self.accounts[user.email]
        self.accounts[user.email] = (password, updated)
        return updated

    async def send_password_reset(self, email):
        if email not in self.accounts:
            raise AuthProviderError("auth/user-not-found")
        self.reset_requests.append(email)


@pytest.fixture
def provider():
    return FakeAuthProvider()


@pytest.fixture
def auth(provider, store, storage):
    return AuthService(provider, UserService(store), storage)


class TestErrorMessages:
    def test_known_code(self):
        assert get_error_message("auth/wrong-password") == "Incorrect password. Please try again."

    def test_unknown_code_is_humanized(self):
        assert get_error_message("auth/quota-exceeded") == "quota exceeded"


class TestSignUp:
    async def test_sign_up_saves_profile_and_starts_session(self, auth, store, storage):
        session = SessionContext()

        result = await auth.sign_up(
            session, "asha@sparshnfc.in", "secret1", {"fullName": "Asha Rao", "phone": "9876543210"}
        )

        assert result["success"] is True
        user = result["user"]
        assert user.display_name == "Asha Rao"
        assert session.user == user
        profile = store.collections["users"][user.uid]
        assert profile["fullName"] == "Asha Rao"
        assert profile["email"] == "asha@sparshnfc.in"
        assert "createdAt" in profile
        assert json.loads(storage.get("sparshUser"))["uid"] == user.uid
        assert json.loads(storage.get("sparshUserProfile"))["fullName"] == "Asha Rao"

    async def test_sign_up_rejects_malformed_email_before_provider(self, auth, provider):
        result = await auth.sign_up(SessionContext(), "not-an-email", "secret1")

        assert result == {"success": False, "error": "Invalid email address."}
        assert provider.accounts == {}

    async def test_sign_up_maps_provider_errors(self, auth):
        await auth.sign_up(SessionContext(), "asha@sparshnfc.in", "secret1")

        result = await auth.sign_up(SessionContext(), "asha@sparshnfc.in", "secret1")

        assert result["error"] == "This email is already registered. Please sign in instead."


class TestSignInOut:
    async def test_sign_in_notifies_session_listeners(self, auth):
        await auth.sign_up(SessionContext(), "asha@sparshnfc.in", "secret1")
        session = SessionContext()
        seen = []
        session.subscribe(seen.append)

        result = await auth.sign_in(session, "asha@sparshnfc.in", "secret1")

        assert result["success"] is True
        assert seen == [result["user"]]
        assert auth.is_authenticated(session) is True
        assert auth.current_user(session).email == "asha@sparshnfc.in"

    async def test_wrong_password(self, auth):
        await auth.sign_up(SessionContext(), "asha@sparshnfc.in", "secret1")
        session = SessionContext()

        result = await auth.sign_in(session, "asha@sparshnfc.in", "nope")

        assert result == {"success": False, "error": "Incorrect password. Please try again."}
        assert session.user is None

    async def test_sign_out_tears_down_session_and_mirrors(self, auth, storage):
        session = SessionContext()
        await auth.sign_up(session, "asha@sparshnfc.in", "secret1")
        seen = []
        session.subscribe(seen.append)

        result = await auth.sign_out(session)

        assert result == {"success": True}
        assert seen == [None]
        assert session.closed is True
        assert storage.get("sparshUser") is None
        assert storage.get("sparshUserProfile") is None

    async def test_sign_in_after_sign_out_needs_new_session(self, auth):
        session = SessionContext()
        await auth.sign_up(session, "asha@sparshnfc.in", "secret1")
        await auth.sign_out(session)

        result = await auth.sign_in(session, "asha@sparshnfc.in", "secret1")

        assert result == {"success": False, "error": SESSION_CLOSED_MESSAGE}
        assert session.user is None
        assert (await auth.sign_in(SessionContext(), "asha@sparshnfc.in", "secret1"))["success"] is True

    async def test_password_reset(self, auth, provider):
        await auth.sign_up(SessionContext(), "asha@sparshnfc.in", "secret1")

        assert (await auth.send_password_reset("asha@sparshnfc.in"))["success"] is True
        assert provider.reset_requests == ["asha@sparshnfc.in"]

        missing = await auth.send_password_reset("ghost@sparshnfc.in")
        assert missing["error"] == "No account found with this email."

    def test_require_auth_remembers_redirect(self, auth, storage, signed_in_session):
        assert auth.require_auth(SessionContext(), "/dashboard.html") is False
        assert storage.get("redirectAfterLogin") == "/dashboard.html"
        assert auth.require_auth(signed_in_session, "/checkout.html") is True


class TestSessionContext:
    def test_set_user_after_teardown_fails(self, customer):
        session = SessionContext()
        session.teardown()

        with pytest.raises(RuntimeError):
            session.set_user(customer)

    def test_failing_listener_does_not_stop_others(self, customer):
        session = SessionContext()
        seen = []

        def broken(user):
            raise ValueError("boom")

        session.subscribe(broken)
        session.subscribe(seen.append)
        session.set_user(customer)

        assert seen == [customer]


def _provider_with(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return FirebaseAuthProvider(api_key="test-key", base_url="https://auth.test/v1", client=client)


class TestFirebaseAuthProvider:
    async def test_sign_in_looks_up_account(self):
        calls = []

        def handler(request):
            calls.append((request.url.path, request.url.params.get("key"), json.loads(request.content)))
            if request.url.path.endswith("accounts:signInWithPassword"):
                return httpx.Response(200, json={"localId": "u1", "idToken": "id", "refreshToken": "r"})
            return httpx.Response(200, json={"users": [{
                "localId": "u1", "email": "a@sparshnfc.in", "displayName": "Asha", "emailVerified": True
            }]})

        user = await _provider_with(handler).sign_in("a@sparshnfc.in", "secret1")

        assert user.uid == "u1"
        assert user.display_name == "Asha"
        assert user.email_verified is True
        assert user.id_token == "id"
        assert [c[0] for c in calls] == ["/v1/accounts:signInWithPassword", "/v1/accounts:lookup"]
        assert calls[0][1] == "test-key"
        assert calls[1][2] == {"idToken": "id"}

    @pytest.mark.parametrize("message, code", [
        ("EMAIL_EXISTS", "auth/email-already-in-use"),
        ("WEAK_PASSWORD : Password should be at least 6 characters", "auth/weak-password"),
        ("INVALID_LOGIN_CREDENTIALS", "auth/invalid-credential"),
        ("QUOTA_EXCEEDED", "auth/quota-exceeded"),
    ])
    async def test_rest_errors_map_to_auth_codes(self, message, code):
        def handler(request):
            return httpx.Response(400, json={"error": {"code": 400, "message": message}})

        with pytest.raises(AuthProviderError) as excinfo:
            await _provider_with(handler).create_account("a@sparshnfc.in", "secret1")

        assert excinfo.value.code == code

    async def test_transport_failure_is_network_error(self):
        def handler(request):
            raise httpx.ConnectError("offline", request=request)

        with pytest.raises(AuthProviderError) as excinfo:
            await _provider_with(handler).send_password_reset("a@sparshnfc.in")

        assert excinfo.value.code == "auth/network-request-failed"

    async def test_password_reset_payload(self):
        payloads = []

        def handler(request):
            payloads.append(json.loads(request.content))
            return httpx.Response(200, json={"email": "a@sparshnfc.in"})

        await _provider_with(handler).send_password_reset("a@sparshnfc.in")

        assert payloads == [{"requestType": "PASSWORD_RESET", "email": "a@sparshnfc.in"}]
