"""Supabase auth lookup for bearer tokens."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from supabase import Client


class AuthClient(Protocol):
    """Resolves an access token to the authenticated user id."""

    def get_user_id(self, access_token: str) -> UUID:
        """Return the user id or raise with the provider's message."""


@dataclass
class SupabaseAuthClient(AuthClient):
    """Auth client backed by Supabase GoTrue."""

    client: Client

    def get_user_id(self, access_token: str) -> UUID:
        """Validate the JWT with Supabase and return its user id."""
        response = self.client.auth.get_user(access_token)
        if response is None or response.user is None:
            raise PermissionError("Invalid or expired session")
        return UUID(str(response.user.id))
