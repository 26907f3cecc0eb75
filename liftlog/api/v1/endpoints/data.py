"""Account data management."""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.api.deps import get_user_id
from liftlog.db.session import get_db
from liftlog.services.workout_pipeline import clear_user_data

router = APIRouter()


@router.post("/clear")
async def clear_data(
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    """Delete all of the user's workouts, custom exercises and personal records."""
    await clear_user_data(db, user_id)
    return {"success": True}
