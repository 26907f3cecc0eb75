"""HTTP client for the Liftlog API."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any

import httpx

from liftlog.client.live import LiveWorkout
from liftlog.core.constants import RECORDS_SYNCED_HEADER, USER_ID_HEADER
from liftlog.schemas.exercise import ExerciseCreate, ExerciseRead, ExerciseUpdate
from liftlog.schemas.record import PersonalRecordRead, RebuildReport, VerifyReport
from liftlog.schemas.workout import PreviousSetsRead, WorkoutCreate, WorkoutRead, WorkoutUpdate

logger = logging.getLogger(__name__)


class LiftlogAPIError(Exception):
    def __init__(self, status_code: int, detail: Any, body: dict | None = None):
        super().__init__(f"HTTP {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail
        self.body = body or {}


class LiftlogClient:
    """
    Thin typed wrapper over httpx.Client.

    Pass an existing client (a FastAPI TestClient works) or a base_url to
    open one. Every request carries the user id header.
    """

    def __init__(
        self,
        base_url: str = "",
        user_id: uuid.UUID | str | None = None,
        http: httpx.Client | None = None,
        api_prefix: str = "/api/v1",
        timeout: float = 30.0,
    ):
        self._owns_http = http is None
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self.api_prefix = api_prefix.rstrip("/")
        self.headers = {USER_ID_HEADER: str(user_id)} if user_id else {}
        self.last_records_synced: bool | None = None

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def __enter__(self) -> LiftlogClient:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        response = self.http.request(method, f"{self.api_prefix}{path}", headers=self.headers, **kwargs)
        if response.status_code >= 400:
            body: dict = {}
            if response.headers.get("content-type", "").startswith("application/json"):
                body = response.json()
            detail = body.get("detail") or response.text or f"HTTP {response.status_code}"
            logger.warning("%s %s failed: %s", method, path, detail)
            raise LiftlogAPIError(response.status_code, detail, body)
        return response

    def _write_workout(self, method: str, path: str, payload: WorkoutCreate | WorkoutUpdate) -> WorkoutRead:
        response = self._request(method, path, json=payload.model_dump(mode="json", exclude_none=True))
        synced = response.headers.get(RECORDS_SYNCED_HEADER)
        self.last_records_synced = None if synced is None else synced == "true"
        if self.last_records_synced is False:
            logger.warning("Workout saved but personal records were not updated")
        return WorkoutRead.model_validate(response.json())

    # -- workouts ----------------------------------------------------------------

    def list_workouts(
        self,
        skip: int = 0,
        limit: int = 50,
        from_date: datetime | None = None,
        to_date: datetime | None = None,
    ) -> list[WorkoutRead]:
        params: dict[str, Any] = {"skip": skip, "limit": limit}
        if from_date:
            params["from_date"] = from_date.isoformat()
        if to_date:
            params["to_date"] = to_date.isoformat()
        return [WorkoutRead.model_validate(w) for w in self._request("GET", "/workouts", params=params).json()]

    def all_workouts(self, page_size: int = 100) -> list[WorkoutRead]:
        workouts: list[WorkoutRead] = []
        while True:
            page = self.list_workouts(skip=len(workouts), limit=page_size)
            workouts.extend(page)
            if len(page) < page_size:
                return workouts

    def get_workout(self, workout_id: uuid.UUID) -> WorkoutRead:
        return WorkoutRead.model_validate(self._request("GET", f"/workouts/{workout_id}").json())

    def create_workout(self, payload: WorkoutCreate) -> WorkoutRead:
        return self._write_workout("POST", "/workouts", payload)

    def update_workout(self, workout_id: uuid.UUID, payload: WorkoutUpdate) -> WorkoutRead:
        return self._write_workout("PUT", f"/workouts/{workout_id}", payload)

    def delete_workout(self, workout_id: uuid.UUID) -> None:
        self._request("DELETE", f"/workouts/{workout_id}")

    def previous_sets(
        self,
        exercise_name: str,
        before: datetime | None = None,
        exclude_workout_id: uuid.UUID | None = None,
    ) -> PreviousSetsRead:
        params: dict[str, Any] = {}
        if before:
            params["before"] = before.isoformat()
        if exclude_workout_id:
            params["exclude_workout_id"] = str(exclude_workout_id)
        response = self._request("GET", f"/workouts/previous-sets/{exercise_name}", params=params)
        return PreviousSetsRead.model_validate(response.json())

    # -- records -----------------------------------------------------------------

    def list_records(self, exercise_name: str | None = None) -> list[PersonalRecordRead]:
        params = {"exercise_name": exercise_name} if exercise_name else {}
        return [PersonalRecordRead.model_validate(r) for r in self._request("GET", "/records", params=params).json()]

    def current_records(self, exercise_name: str | None = None) -> list[PersonalRecordRead]:
        params = {"exercise_name": exercise_name} if exercise_name else {}
        response = self._request("GET", "/records/current", params=params)
        return [PersonalRecordRead.model_validate(r) for r in response.json()]

    def verify_records(self) -> VerifyReport:
        return VerifyReport.model_validate(self._request("GET", "/records/verify").json())

    def rebuild_records(self) -> RebuildReport:
        return RebuildReport.model_validate(self._request("POST", "/records/rebuild").json())

    # -- exercises ---------------------------------------------------------------

    def list_exercises(self) -> list[ExerciseRead]:
        return [ExerciseRead.model_validate(e) for e in self._request("GET", "/exercises").json()]

    def create_exercise(self, payload: ExerciseCreate) -> ExerciseRead:
        response = self._request("POST", "/exercises", json=payload.model_dump(mode="json"))
        return ExerciseRead.model_validate(response.json())

    def update_exercise(
        self, exercise_id: uuid.UUID, payload: ExerciseUpdate, rename_history: bool = False
    ) -> ExerciseRead:
        response = self._request(
            "PUT",
            f"/exercises/{exercise_id}",
            json=payload.model_dump(mode="json"),
            params={"rename_history": "true"} if rename_history else None,
        )
        return ExerciseRead.model_validate(response.json())

    def delete_exercise(self, exercise_id: uuid.UUID) -> None:
        self._request("DELETE", f"/exercises/{exercise_id}")

    def clear_data(self) -> None:
        self._request("POST", "/data/clear")

    # -- live workouts -----------------------------------------------------------

    def start_workout(self, start_time: datetime | None = None) -> LiveWorkout:
        """Open a new live workout judged against the user's full history."""
        return LiveWorkout(history=self.all_workouts(), start_time=start_time)

    def edit_workout(self, workout_id: uuid.UUID) -> LiveWorkout:
        return LiveWorkout.edit(self.get_workout(workout_id), self.all_workouts())

    def save(self, live: LiveWorkout) -> WorkoutRead:
        """Submit a live workout and adopt the server's copy as the new editing baseline."""
        payload = live.to_payload()
        if live.editing_workout_id is None:
            saved = self.create_workout(payload)
        else:
            saved = self.update_workout(live.editing_workout_id, payload)
        live.editing_workout_id = saved.id
        live.updated_at = saved.updated_at
        live.history = [w for w in live.history if w.id != saved.id]
        return saved
