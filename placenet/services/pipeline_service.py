"""
Application Pipeline Engine.

Owns the status of every application and enforces status changes:

    applied -> screening -> interview -> hired
       |          |  ^          |
       |          v  |          v
       +------> rejected <------+      (screening may also go back to applied)

hired and rejected are terminal. Re-requesting the current status is always
accepted so a repeated click is harmless.

Synthetic (demo) applications are never written to the database: their
status changes land in a SyntheticStatusOverlay owned by the engine.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional

from placenet.core.errors import Conflict, Forbidden, InvalidTransition, NotFound, Unauthorized, ValidationError
from placenet.db.postgres import get_database
from placenet.db.schema import utcnow
from placenet.services.demo_data import (
    is_synthetic_application, synthetic_application_defaults, synthetic_applications,
)
from placenet.services.repositories import ApplicationRepository

logger = logging.getLogger(__name__)

PIPELINE_STAGES = ("applied", "screening", "interview", "hired", "rejected")
OTHER_BUCKET = "other"

ALLOWED_TRANSITIONS: Dict[str, frozenset] = {
    "applied": frozenset({"screening", "rejected"}),
    "screening": frozenset({"interview", "applied", "rejected"}),
    "interview": frozenset({"hired", "rejected"}),
    "hired": frozenset(),
    "rejected": frozenset(),
}


def validate_transition(current: str, requested: str) -> None:
    """Raise unless current -> requested is a pipeline edge (or a no-op)."""
    if requested not in ALLOWED_TRANSITIONS:
        raise ValidationError(
            f"Unknown status '{requested}'. Expected one of: {', '.join(PIPELINE_STAGES)}"
        )
    if requested == current:
        return
    # Rows written before the table existed may hold a stray status; let them rejoin the pipeline
    if current not in ALLOWED_TRANSITIONS:
        return
    if requested not in ALLOWED_TRANSITIONS[current]:
        raise InvalidTransition(current, requested)


class SyntheticStatusOverlay:
    """In-memory id -> status map for demo applications. Never persisted."""

    def __init__(self):
        self._statuses: Dict[str, str] = {}
        self._updated_at: Dict[str, datetime] = {}

    def get(self, application_id: str) -> Optional[str]:
        return self._statuses.get(application_id)

    def updated_at(self, application_id: str) -> Optional[datetime]:
        return self._updated_at.get(application_id)

    def set(self, application_id: str, status: str, when: datetime) -> None:
        self._statuses[application_id] = status
        self._updated_at[application_id] = when

    def reset(self) -> None:
        self._statuses.clear()
        self._updated_at.clear()

    def __contains__(self, application_id: str) -> bool:
        return application_id in self._statuses

    def __len__(self) -> int:
        return len(self._statuses)


class PipelineEngine:
    """
    Status mutation and recruiter-facing listing of applications.

    Args:
        applications: persistence for real applications
        overlay: status store for synthetic applications (fresh one if omitted)
        demo_mode: when False, synthetic ids behave like unknown ids
        clock: source of "now", injectable for tests
    """

    def __init__(
        self,
        applications: ApplicationRepository,
        overlay: Optional[SyntheticStatusOverlay] = None,
        demo_mode: bool = True,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.applications = applications
        self.overlay = overlay if overlay is not None else SyntheticStatusOverlay()
        self.demo_mode = demo_mode
        self.clock = clock
        # Synthetic records are dated relative to engine start so the set stays fixed
        self.epoch = clock()
        self._synthetic_defaults = synthetic_application_defaults()

    # ------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------

    def set_application_status(
        self,
        application_id: str,
        new_status: str,
        caller: Optional[dict],
        expected_version: Optional[int] = None,
    ) -> dict:
        """
        Move one application to new_status.

        Returns {id, status, updated_at, version}; version is None for
        synthetic applications.

        Raises:
            Unauthorized: no caller
            ValidationError: empty or unknown status
            InvalidTransition: not an edge of the pipeline
            NotFound: id resolves to nothing
            Forbidden: caller does not recruit for the application's job
            Conflict: expected_version no longer matches
        """
        if not caller:
            raise Unauthorized()
        new_status = (new_status or "").strip()
        if not new_status:
            raise ValidationError("Status is required")

        if is_synthetic_application(application_id):
            return self._set_synthetic_status(application_id, new_status)

        current = self.applications.get_with_owner(application_id)
        if current is None:
            raise NotFound("Application not found")
        if caller.get("role") != "admin" and current["recruiter_id"] != caller.get("user_id"):
            raise Forbidden("Not authorized to update this application")

        validate_transition(current["status"], new_status)

        updated = self.applications.update_status(application_id, new_status, expected_version)
        if updated is None:
            if self.applications.get(application_id) is None:
                raise NotFound("Application not found")
            raise Conflict(
                f"Application {application_id} was modified by someone else; reload and retry"
            )

        logger.info(
            "Application %s status %s -> %s (v%s) by %s",
            application_id, current["status"], new_status, updated["version"], caller.get("user_id"),
        )
        return {
            "id": updated["id"],
            "status": updated["status"],
            "updated_at": updated["updated_at"],
            "version": updated["version"],
        }

    def _set_synthetic_status(self, application_id: str, new_status: str) -> dict:
        if not self.demo_mode or application_id not in self._synthetic_defaults:
            raise NotFound("Application not found")

        current = self.overlay.get(application_id) or self._synthetic_defaults[application_id]
        validate_transition(current, new_status)

        now = self.clock()
        self.overlay.set(application_id, new_status, now)
        logger.info("Demo application %s status updated to: %s", application_id, new_status)
        return {"id": application_id, "status": new_status, "updated_at": now, "version": None}

    # ------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------

    def synthetic_records(self) -> List[dict]:
        """The fixed demo set with overlay statuses applied."""
        if not self.demo_mode:
            return []
        records = synthetic_applications(self.epoch)
        for record in records:
            status = self.overlay.get(record["id"])
            if status is not None:
                record["status"] = status
                record["updated_at"] = self.overlay.updated_at(record["id"])
        return records

    def list_applications_for_recruiter(self, recruiter_id: str) -> List[dict]:
        """
        Real applications for recruiter_id (newest first) followed by the
        synthetic demo set. Demo records are shown to every recruiter.
        """
        real = self.applications.list_for_recruiter(recruiter_id)
        for record in real:
            record["is_demo"] = False
        return real + self.synthetic_records()

    @staticmethod
    def group_by_status(applications: List[dict]) -> Dict[str, List[dict]]:
        """
        Partition applications into the five pipeline buckets plus "other".
        Order within each bucket follows the input order.
        """
        buckets: Dict[str, List[dict]] = {stage: [] for stage in PIPELINE_STAGES}
        buckets[OTHER_BUCKET] = []
        for application in applications:
            buckets.get(application.get("status"), buckets[OTHER_BUCKET]).append(application)
        return buckets

    def recruitment_metrics(self, recruiter_id: str) -> dict:
        """Aggregate rates over the recruiter's real applications, computed on read."""
        rows = self.applications.list_for_metrics(recruiter_id)
        total = len(rows)
        if total == 0:
            return {"total_applications": 0, "interview_rate": 0.0, "hire_rate": 0.0, "avg_time_to_hire": 0.0}

        interviews = sum(1 for r in rows if r["status"] == "interview")
        hired = [r for r in rows if r["status"] == "hired"]
        days_to_hire = [
            (r["updated_at"] - r["applied_at"]).total_seconds() / 86400 for r in hired
        ]
        return {
            "total_applications": total,
            "interview_rate": round(interviews / total * 100, 2),
            "hire_rate": round(len(hired) / total * 100, 2),
            "avg_time_to_hire": round(sum(days_to_hire) / len(days_to_hire), 1) if days_to_hire else 0.0,
        }


# Singleton instance
_pipeline_engine: Optional[PipelineEngine] = None


def get_pipeline_engine() -> PipelineEngine:
    """Get or create the pipeline engine (singleton pattern)"""
    global _pipeline_engine
    if _pipeline_engine is None:
        from placenet.core.config import get_settings
        _pipeline_engine = PipelineEngine(
            ApplicationRepository(get_database()),
            demo_mode=get_settings().demo_mode,
        )
    return _pipeline_engine


def reset_pipeline_engine() -> None:
    """Drop the engine (and its overlay); the next call builds a fresh one."""
    global _pipeline_engine
    _pipeline_engine = None
