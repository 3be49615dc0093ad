from __future__ import annotations

import logging

from libs.core.application.contracts import BlockRepository
from libs.core.domain.entities import BlockStatus

logger = logging.getLogger(__name__)


class BlockRegistry:
    """Answers whether an account is currently blocked.

    Lookups fail open: if the block list cannot be queried the account is
    reported as not blocked so alert delivery keeps working.
    """

    def __init__(self, repository: BlockRepository | None) -> None:
        self._repository = repository

    def check_blocked(self, user_id: str) -> BlockStatus:
        if self._repository is None:
            return BlockStatus(blocked=False)

        try:
            record = self._repository.find_active_block(user_id)
        except Exception:
            logger.exception("Block status lookup failed for user %s", user_id)
            return BlockStatus(blocked=False)

        if record is None or not record.is_active:
            return BlockStatus(blocked=False)

        logger.info("User %s is blocked: %s", user_id, record.reason)
        return BlockStatus(
            blocked=True,
            reason=record.reason,
            blocked_by=record.blocked_by,
            blocked_at=record.blocked_at,
        )
