import logging
import uuid
from typing import Any, Dict, Optional

from shortcode_app.schemas.user import UserResponse
from shortcode_app.storage.strategies import CollectionStrategy, StoredRecord, matches


logger = logging.getLogger(__name__)


class UserService:
    """Users are created on first GitHub login and never changed afterwards."""

    def __init__(self, users: CollectionStrategy):
        self.users = users

    async def find_or_create_github_user(
        self,
        access_token: str,
        profile: Dict[str, Any]
    ) -> StoredRecord:
        """Reuse the user whose stored GitHub profile id matches, else create one."""
        existing = await self.users.filter(
            matches({"_github_auth": {"profile": {"id": profile.get("id")}}})
        )
        if existing:
            return existing[0]

        user_id = str(uuid.uuid4())
        await self.users.set(
            user_id,
            {"_github_auth": {"access_token": access_token, "profile": profile}},
        )
        logger.info("Created user %s for GitHub login %s", user_id, profile.get("login"))
        return await self.users.get(user_id)

    async def get_user(self, key: str) -> Optional[StoredRecord]:
        return await self.users.get(key)


def to_user_response(user: StoredRecord) -> UserResponse:
    profile = user.props.get("_github_auth", {}).get("profile", {})
    return UserResponse(
        key=user.key,
        login=profile.get("login"),
        name=profile.get("name"),
        profile=profile,
    )
