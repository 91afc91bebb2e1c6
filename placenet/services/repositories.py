"""
Persistence Layer - row access for every relational table.

Each repository wraps one Database and opens a session per call, so a
method is one transaction. Rows come back as plain dicts with snake_case
keys; services and routes never see SQLAlchemy objects.
"""

import uuid
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import and_, delete, func, insert, or_, select, update

from placenet.db.postgres import Database
from placenet.db.schema import (
    applications, chat_messages, jobs, recruiter_profiles, student_profiles,
    users, utcnow,
)


def new_id() -> str:
    return str(uuid.uuid4())


def _row(row) -> Optional[dict]:
    return dict(row._mapping) if row is not None else None


def _student_profile(row: Optional[dict]) -> Optional[dict]:
    if row is None:
        return None
    if row.get("cgpa") is not None:
        row["cgpa"] = float(row["cgpa"])
    row["skills"] = list(row.get("skills") or [])
    return row


# ============================================================
# USERS
# ============================================================

class UserRepository:

    def __init__(self, database: Database):
        self.database = database

    def create(self, email: str, password_hash: str, role: str,
               first_name: Optional[str] = None, last_name: Optional[str] = None) -> dict:
        now = utcnow()
        values = {
            "id": new_id(), "email": email, "password_hash": password_hash,
            "role": role, "first_name": first_name, "last_name": last_name,
            "is_active": True, "created_at": now, "updated_at": now,
        }
        with self.database.session() as db:
            db.execute(insert(users).values(**values))
        return values

    def get(self, user_id: str) -> Optional[dict]:
        with self.database.session() as db:
            return _row(db.execute(select(users).where(users.c.id == user_id)).first())

    def get_by_email(self, email: str) -> Optional[dict]:
        with self.database.session() as db:
            return _row(db.execute(select(users).where(users.c.email == email)).first())


# ============================================================
# PROFILES
# ============================================================

class ProfileRepository:

    def __init__(self, database: Database):
        self.database = database

    def create_student(self, user_id: str, data: dict) -> dict:
        now = utcnow()
        values = {
            "id": new_id(), "user_id": user_id, "created_at": now, "updated_at": now,
            "resume_score": 0, "interview_score": 0, "learning_streak": 0,
            **data,
        }
        with self.database.session() as db:
            db.execute(insert(student_profiles).values(**values))
        return self.get_student(user_id)

    def get_student(self, user_id: str) -> Optional[dict]:
        with self.database.session() as db:
            row = db.execute(
                select(student_profiles).where(student_profiles.c.user_id == user_id)
            ).first()
        return _student_profile(_row(row))

    def update_student(self, user_id: str, fields: dict) -> Optional[dict]:
        with self.database.session() as db:
            db.execute(
                update(student_profiles)
                .where(student_profiles.c.user_id == user_id)
                .values(**fields, updated_at=utcnow())
            )
        return self.get_student(user_id)

    def create_recruiter(self, user_id: str, data: dict) -> dict:
        now = utcnow()
        values = {
            "id": new_id(), "user_id": user_id, "verified": False,
            "created_at": now, "updated_at": now, **data,
        }
        with self.database.session() as db:
            db.execute(insert(recruiter_profiles).values(**values))
        return values

    def get_recruiter(self, user_id: str) -> Optional[dict]:
        with self.database.session() as db:
            return _row(db.execute(
                select(recruiter_profiles).where(recruiter_profiles.c.user_id == user_id)
            ).first())


# ============================================================
# JOBS
# ============================================================

class JobRepository:

    def __init__(self, database: Database):
        self.database = database

    def create(self, recruiter_id: str, data: dict) -> dict:
        now = utcnow()
        values = {"id": new_id(), "recruiter_id": recruiter_id,
                  "created_at": now, "updated_at": now, **data}
        with self.database.session() as db:
            db.execute(insert(jobs).values(**values))
        return self.get(values["id"])

    def get(self, job_id: str) -> Optional[dict]:
        with self.database.session() as db:
            return _row(db.execute(select(jobs).where(jobs.c.id == job_id)).first())

    def list_active(self, search: Optional[str] = None, location: Optional[str] = None,
                    job_type: Optional[str] = None, skill: Optional[str] = None) -> List[dict]:
        """Active jobs, newest first. Skill matching is case-insensitive."""
        query = select(jobs).where(jobs.c.is_active.is_(True))
        if search:
            query = query.where(jobs.c.title.ilike(f"%{search}%"))
        if location:
            query = query.where(jobs.c.location.ilike(f"%{location}%"))
        if job_type:
            query = query.where(jobs.c.type == job_type)
        query = query.order_by(jobs.c.created_at.desc())

        with self.database.session() as db:
            rows = [_row(r) for r in db.execute(query).fetchall()]

        # skills is a JSON array; filter here to stay portable across backends
        if skill:
            wanted = skill.lower()
            rows = [r for r in rows if wanted in {s.lower() for s in (r["skills"] or [])}]
        return rows

    def list_by_recruiter(self, recruiter_id: str) -> List[dict]:
        with self.database.session() as db:
            result = db.execute(
                select(jobs).where(jobs.c.recruiter_id == recruiter_id)
                .order_by(jobs.c.created_at.desc())
            )
            return [_row(r) for r in result.fetchall()]

    def update(self, job_id: str, fields: dict) -> Optional[dict]:
        with self.database.session() as db:
            db.execute(update(jobs).where(jobs.c.id == job_id).values(**fields, updated_at=utcnow()))
        return self.get(job_id)

    def delete_with_applications(self, job_id: str) -> int:
        """
        Delete a job and every application referencing it, in one transaction.
        Returns the number of applications removed.
        """
        with self.database.session() as db:
            removed = db.execute(delete(applications).where(applications.c.job_id == job_id)).rowcount
            db.execute(delete(jobs).where(jobs.c.id == job_id))
        return removed

    def count_applications(self, job_ids: Iterable[str]) -> Dict[str, int]:
        job_ids = list(job_ids)
        if not job_ids:
            return {}
        with self.database.session() as db:
            result = db.execute(
                select(applications.c.job_id, func.count())
                .where(applications.c.job_id.in_(job_ids))
                .group_by(applications.c.job_id)
            )
            return {job_id: count for job_id, count in result.fetchall()}


# ============================================================
# APPLICATIONS
# ============================================================

class ApplicationRepository:

    def __init__(self, database: Database):
        self.database = database

    def create(self, student_id: str, job_id: str, data: dict) -> dict:
        now = utcnow()
        values = {
            "id": new_id(), "student_id": student_id, "job_id": job_id,
            "status": "applied", "version": 1, "applied_at": now, "updated_at": now,
            **data,
        }
        with self.database.session() as db:
            db.execute(insert(applications).values(**values))
        return self.get(values["id"])

    def get(self, application_id: str) -> Optional[dict]:
        with self.database.session() as db:
            return _row(db.execute(
                select(applications).where(applications.c.id == application_id)
            ).first())

    def get_with_owner(self, application_id: str) -> Optional[dict]:
        """Application row plus the recruiter_id of the job it belongs to."""
        query = (
            select(applications, jobs.c.recruiter_id)
            .join(jobs, applications.c.job_id == jobs.c.id)
            .where(applications.c.id == application_id)
        )
        with self.database.session() as db:
            return _row(db.execute(query).first())

    def exists_for(self, student_id: str, job_id: str) -> bool:
        with self.database.session() as db:
            row = db.execute(
                select(applications.c.id).where(and_(
                    applications.c.student_id == student_id,
                    applications.c.job_id == job_id,
                ))
            ).first()
        return row is not None

    def list_by_student(self, student_id: str) -> List[dict]:
        with self.database.session() as db:
            result = db.execute(
                select(applications).where(applications.c.student_id == student_id)
                .order_by(applications.c.applied_at.desc())
            )
            return [_row(r) for r in result.fetchall()]

    def list_by_job(self, job_id: str) -> List[dict]:
        with self.database.session() as db:
            result = db.execute(
                select(applications).where(applications.c.job_id == job_id)
                .order_by(applications.c.applied_at.desc())
            )
            return [_row(r) for r in result.fetchall()]

    def list_for_recruiter(self, recruiter_id: str) -> List[dict]:
        """
        All applications to jobs owned by recruiter_id, newest first,
        each with nested student and job summaries.
        """
        query = (
            select(
                applications,
                jobs.c.title.label("job_title"),
                jobs.c.company.label("job_company"),
                jobs.c.location.label("job_location"),
                users.c.first_name, users.c.last_name, users.c.email,
                users.c.profile_image_url,
                student_profiles.c.skills.label("student_skills"),
            )
            .join(jobs, applications.c.job_id == jobs.c.id)
            .join(users, applications.c.student_id == users.c.id)
            .outerjoin(student_profiles, student_profiles.c.user_id == users.c.id)
            .where(jobs.c.recruiter_id == recruiter_id)
            .order_by(applications.c.applied_at.desc(), applications.c.id)
        )
        with self.database.session() as db:
            rows = [_row(r) for r in db.execute(query).fetchall()]

        nested = []
        for r in rows:
            nested.append({
                **{c.name: r[c.name] for c in applications.columns},
                "student": {
                    "id": r["student_id"],
                    "first_name": r.pop("first_name"),
                    "last_name": r.pop("last_name"),
                    "email": r.pop("email"),
                    "profile_image_url": r.pop("profile_image_url"),
                    "skills": list(r.pop("student_skills") or []),
                },
                "job": {
                    "id": r["job_id"],
                    "title": r.pop("job_title"),
                    "company": r.pop("job_company"),
                    "location": r.pop("job_location"),
                },
            })
        return nested

    def update_status(self, application_id: str, status: str,
                      expected_version: Optional[int] = None) -> Optional[dict]:
        """
        Write a new status and bump version.

        With expected_version the write only lands if the stored version still
        matches; returns None when it does not (or the row vanished).
        """
        conditions = [applications.c.id == application_id]
        if expected_version is not None:
            conditions.append(applications.c.version == expected_version)

        with self.database.session() as db:
            result = db.execute(
                update(applications)
                .where(and_(*conditions))
                .values(status=status, updated_at=utcnow(), version=applications.c.version + 1)
            )
            if result.rowcount == 0:
                return None
            return _row(db.execute(
                select(applications).where(applications.c.id == application_id)
            ).first())

    def list_for_metrics(self, recruiter_id: str) -> List[dict]:
        query = (
            select(applications.c.status, applications.c.applied_at, applications.c.updated_at)
            .join(jobs, applications.c.job_id == jobs.c.id)
            .where(jobs.c.recruiter_id == recruiter_id)
        )
        with self.database.session() as db:
            return [_row(r) for r in db.execute(query).fetchall()]


# ============================================================
# CHAT
# ============================================================

class ChatRepository:

    def __init__(self, database: Database):
        self.database = database

    def create(self, sender_id: str, data: Dict[str, Any]) -> dict:
        values = {"id": new_id(), "sender_id": sender_id, "created_at": utcnow(), **data}
        with self.database.session() as db:
            db.execute(insert(chat_messages).values(**values))
        return values

    def conversation(self, user_a: str, user_b: str) -> List[dict]:
        """Both directions between two users, oldest first."""
        query = (
            select(chat_messages)
            .where(or_(
                and_(chat_messages.c.sender_id == user_a, chat_messages.c.receiver_id == user_b),
                and_(chat_messages.c.sender_id == user_b, chat_messages.c.receiver_id == user_a),
            ))
            .order_by(chat_messages.c.created_at.asc(), chat_messages.c.id)
        )
        with self.database.session() as db:
            return [_row(r) for r in db.execute(query).fetchall()]
