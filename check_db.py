import asyncio
import os
import sys

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

# Allow running from the repository root without installing
sys.path.append(os.getcwd())

from liftlog.db.session import async_session_maker, engine
from liftlog.models import CustomExercise, PersonalRecord, Workout, WorkoutExercise, WorkoutSet
from liftlog.services.record_store import verify_records


async def check_data():
    async with async_session_maker() as session:
        for model in (Workout, WorkoutExercise, WorkoutSet, PersonalRecord, CustomExercise):
            try:
                count = (await session.execute(select(func.count()).select_from(model))).scalar_one()
                print(f"Table '{model.__tablename__}' row count: {count}")
            except SQLAlchemyError as e:
                print(f"Error querying {model.__tablename__}: {e}")
                return

        user_ids = (await session.execute(select(Workout.user_id).distinct())).scalars().all()
        print(f"Verifying personal records for {len(user_ids)} user(s)...")
        for user_id in user_ids:
            report = await verify_records(session, user_id)
            status = "ok" if report.consistent else f"{len(report.drift)} difference(s)"
            print(f"  {user_id}: {report.workouts_scanned} workouts, {status}")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(check_data())
