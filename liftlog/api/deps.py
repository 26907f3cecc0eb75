"""Shared request dependencies."""

import uuid

from fastapi import Header

from liftlog.core.config import get_settings
from liftlog.core.constants import USER_ID_HEADER


async def get_user_id(
    x_user_id: uuid.UUID | None = Header(default=None, alias=USER_ID_HEADER),
) -> uuid.UUID:
    """Acting user: the X-User-Id header, else the configured single user."""
    return x_user_id or get_settings().default_user_id
