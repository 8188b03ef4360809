"""User profiles: identity-provider subject mapped to a display name and role."""

from typing import Any, Optional

from pydantic import ValidationError

from logistx.demo_data import demo_users
from logistx.models import OperationResult, UserProfile, UserProfileCreate, UserProfilePatch, UserStats
from logistx.store.schema import PROFILES
from logistx.viewmodels.base import EntityViewModel, validation_message


class UserViewModel(EntityViewModel[UserProfile]):
    entity = "users"
    table = PROFILES
    model = UserProfile

    def demo_rows(self) -> list[UserProfile]:
        return demo_users()

    async def create_user(self, payload: UserProfileCreate | dict[str, Any]) -> OperationResult:
        try:
            data = self._coerce(payload, UserProfileCreate)
        except ValidationError as e:
            return self._invalid("create", validation_message(e))
        if not data.user_id.strip() or not data.email.strip() or not data.name.strip():
            return self._invalid("create", "Please fill in all required fields")
        if any(u.user_id == data.user_id for u in self.rows):
            return self._invalid("create", "A profile for this user already exists")
        values = {**data.values(), "role": data.role}

        async def action() -> OperationResult:
            rows = await self.store.insert(self.table, values)
            await self.load()
            return OperationResult.ok("User added successfully!", data=self.find(rows[0]["id"]) or rows[0])

        return await self._run("create", action, "Failed to add user", role=data.role)

    async def update_user(self, profile_id: str, patch: UserProfilePatch | dict[str, Any]) -> OperationResult:
        try:
            data = self._coerce(patch, UserProfilePatch)
        except ValidationError as e:
            return self._invalid("update", validation_message(e))
        values = data.values()
        if not values:
            return self._invalid("update", "Nothing to update")

        async def action() -> OperationResult:
            await self.store.update(self.table, values, filters={"id": profile_id})
            await self.load()
            return OperationResult.ok("User updated successfully!", data=self.find(profile_id))

        return await self._run("update", action, "Failed to update user", profile_id=profile_id)

    async def delete_user(self, profile_id: str) -> OperationResult:
        async def action() -> OperationResult:
            await self.store.delete(self.table, filters={"id": profile_id})
            await self.load()
            return OperationResult.ok("User deleted successfully!")

        return await self._run("delete", action, "Failed to delete user", profile_id=profile_id)

    def admin_users(self) -> list[UserProfile]:
        return [u for u in self.rows if u.role == "admin"]

    def staff_users(self) -> list[UserProfile]:
        return [u for u in self.rows if u.role == "staff"]

    def total_users(self) -> int:
        return len(self.rows)

    def user_stats(self) -> UserStats:
        return UserStats(total=self.total_users(), admins=len(self.admin_users()), staff=len(self.staff_users()))

    def role_of(self, user_id: str) -> Optional[str]:
        """Role for an identity-provider subject, or None when it has no profile."""
        profile = next((u for u in self.rows if u.user_id == user_id), None)
        return profile.role if profile else None
