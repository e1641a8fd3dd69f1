"""Account lifecycle: cascading deletion of a user's profile and account."""

from collections.abc import Callable, Sequence
from typing import Protocol
from uuid import UUID

import structlog

from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class AccountCleanupHook(Protocol):
    """Removes content a user authored elsewhere when their account goes away.

    Hooks run inside the deletion's Unit of Work, before the profile and
    user rows are removed, so their writes commit or roll back together.
    """

    async def on_account_deleted(self, uow: IUnitOfWork, user_id: UUID) -> None:
        ...


class PendingContentCleanupHook:
    """Placeholder until authored content (posts) is removed on account deletion."""

    async def on_account_deleted(self, uow: IUnitOfWork, user_id: UUID) -> None:
        logger.warning("account_content_cleanup_pending", user_id=str(user_id))


class AccountService:
    """Coordinates account deletion across the profile and user stores."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        cleanup_hooks: Sequence[AccountCleanupHook] | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._cleanup_hooks = list(cleanup_hooks or [])

    async def delete_account(self, user_id: UUID) -> None:
        """Delete the user's authored content, profile and user record.

        A missing profile or user is not an error. Everything runs in one
        transaction, so a failure part-way leaves nothing deleted.
        """
        async with self._uow_factory() as uow:
            for hook in self._cleanup_hooks:
                await hook.on_account_deleted(uow, user_id)

            profile_deleted = await uow.profiles.delete_by_user(user_id)
            user_deleted = await uow.users.delete(user_id)
            await uow.commit()

        logger.info(
            "account_deleted",
            user_id=str(user_id),
            profile_deleted=profile_deleted,
            user_deleted=user_deleted,
        )
