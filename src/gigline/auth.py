"""
Auth module: email/password login and registration.

Tokens are minted server-side; this module only hands them to the session store.
"""

from typing import Any, Optional

from gigline.transport.http import HttpClient
from gigline.errors import AuthError, GiglineError
from gigline.models.identity import Identity, Role
from gigline.session import SessionStore

SELF_SERVICE_ROLES = {Role.ARTIST, Role.ORGANIZER, Role.PROVIDER}


class Auth:
    def __init__(self, http: HttpClient, session: SessionStore):
        self._http = http
        self._session = session

    async def login(self, email: str, password: str) -> Identity:
        try:
            result = await self._http.post(
                "/auth/login", {"email": email, "password": password}, authenticated=False,
            )
        except GiglineError as e:
            raise AuthError(f"Login failed: {e}")
        return self._store(result)

    async def register(self, email: str, password: str, role: str, name: Optional[str] = None) -> Identity:
        try:
            role_value = Role(role.upper())
        except ValueError:
            raise AuthError(f"Unknown role: {role}", code="invalid_role")
        if role_value not in SELF_SERVICE_ROLES:
            raise AuthError(f"Role {role_value.value} cannot self-register", code="invalid_role")
        body: dict[str, Any] = {"email": email, "password": password, "role": role_value.value}
        if name:
            body["name"] = name
        try:
            result = await self._http.post("/auth/register", body, authenticated=False)
        except GiglineError as e:
            raise AuthError(f"Registration failed: {e}")
        return self._store(result)

    def logout(self) -> None:
        self._session.logout()

    def _store(self, result: Any) -> Identity:
        if not isinstance(result, dict) or not result.get("token") or not isinstance(result.get("user"), dict):
            raise AuthError("Malformed auth response", code="bad_response")
        try:
            return self._session.login(result["token"], result["user"])
        except (KeyError, ValueError) as e:
            raise AuthError(f"Malformed user record: {e}", code="bad_response")
