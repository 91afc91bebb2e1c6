"""
MongoDB Service - CRUD operations for document collections.

Collections in this database:
1. interview_sessions - Mock/real interview attempts with per-question scores
2. resume_analyses    - Resume scoring results, suggestions, missing skills

Scores are produced elsewhere (client or an external scorer) and stored
here as-is; nothing in this module generates them.
"""

from datetime import datetime
from typing import List, Optional

from pymongo.collection import Collection

from placenet.db.mongodb import COLLECTIONS, get_collection
from placenet.db.schema import utcnow


# ============================================================
# HELPER: Convert ObjectId to string for JSON serialization
# ============================================================

def serialize_doc(doc: Optional[dict]) -> Optional[dict]:
    """Convert MongoDB document to JSON-serializable dict with an "id" key."""
    if doc is None:
        return None
    if "_id" in doc:
        doc["id"] = str(doc.pop("_id"))
    return doc


def serialize_docs(docs) -> List[dict]:
    return [serialize_doc(doc) for doc in docs]


# ============================================================
# INTERVIEW SESSIONS COLLECTION
# ============================================================

class InterviewSessionService:
    """
    Handles interview session storage.
    One document per attempt; never updated after insert.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["interviews"])

    def insert(self, student_id: str, session: dict, created_at: Optional[datetime] = None) -> dict:
        """
        Store one interview attempt.

        Args:
            student_id: users.id of the student (foreign reference)
            session: validated InterviewSessionCreate fields (snake_case)

        Returns:
            The stored document, serialized
        """
        doc = {
            **session,
            "student_id": student_id,
            "created_at": created_at or utcnow(),
        }
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return serialize_doc(doc)

    def list_by_student(self, student_id: str, limit: int = 50) -> List[dict]:
        """Attempts for a student, most recent first."""
        cursor = self.collection.find({"student_id": student_id}).sort("created_at", -1).limit(limit)
        return serialize_docs(cursor)

    def average_score(self, student_id: str) -> int:
        """Mean overall_score across attempts (unscored counts as 0); 0 when there are none."""
        scores = [
            doc.get("overall_score") or 0
            for doc in self.collection.find({"student_id": student_id}, {"overall_score": 1})
        ]
        if not scores:
            return 0
        return round(sum(scores) / len(scores))


# ============================================================
# RESUME ANALYSES COLLECTION
# ============================================================

class ResumeAnalysisService:
    """Handles resume analysis storage. Latest document wins for a student."""

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["resume_analyses"])

    def insert(self, student_id: str, analysis: dict, created_at: Optional[datetime] = None) -> dict:
        doc = {
            **analysis,
            "student_id": student_id,
            "created_at": created_at or utcnow(),
        }
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return serialize_doc(doc)

    def get_latest(self, student_id: str) -> Optional[dict]:
        doc = self.collection.find_one(
            {"student_id": student_id},
            sort=[("created_at", -1)]  # Most recent first
        )
        return serialize_doc(doc)
