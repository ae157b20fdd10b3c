"""
Session manager - issue, authenticate and revoke sessions.
Challenge: A signed token stays cryptographically valid until expiry, yet logout must kill it now.
Design: The token carries a session id; a session is live only while its id is in the user's active set.
"""

import logging

from todo_api.core.exceptions import AuthError
from todo_api.core.security import decode_session_token, encode_session_token, new_session_id
from todo_api.services.credential_store import CredentialStore

logger = logging.getLogger(__name__)


class SessionManager:
    """Anonymous -> Authenticated (issue) -> Revoked (revoke), tracked per session id."""

    def __init__(self, credentials: CredentialStore):
        self.credentials = credentials

    async def issue(self, user_id: int) -> str:
        """Open a new session for the user and return its token. Other sessions stay valid."""
        session_id = new_session_id()
        await self.credentials.add_session(user_id, session_id)
        return encode_session_token(user_id, session_id)

    async def authenticate(self, token: str) -> tuple[int, str]:
        """Return (user_id, session_id) for a well-signed token whose session is still active."""
        user_id, session_id = decode_session_token(token)
        if not await self.credentials.has_active_session(user_id, session_id):
            raise AuthError()
        return user_id, session_id

    async def revoke(self, token: str) -> None:
        """End the token's session. Revoking an already revoked session is not an error."""
        user_id, session_id = decode_session_token(token)
        await self.credentials.remove_session(user_id, session_id)
        logger.info("Revoked session for user id=%s", user_id)

    async def revoke_all(self, user_id: int) -> int:
        count = await self.credentials.clear_sessions(user_id)
        logger.info("Revoked %s session(s) for user id=%s", count, user_id)
        return count
