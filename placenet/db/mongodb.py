"""
MongoDB Connection Utility

MongoDB stores:
- Interview sessions (questions/answers/scores per attempt)
- Resume analyses (scores, suggestions, missing skills)

WHY MongoDB for these?
- Schema-flexible: question lists and suggestion sets vary per attempt
- Document-oriented: each attempt is self-contained
- No joins needed: always fetched by student_id
"""
import logging
from typing import Optional

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from placenet.core.config import get_settings

logger = logging.getLogger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: Optional[MongoClient] = None
_db: Optional[Database] = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(get_settings().mongodb_uri, serverSelectionTimeoutMS=5000)
    return _client


def get_mongo_db() -> Database:
    """Get the placenet_docs database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[get_settings().mongodb_db]
    return _db


def set_mongo_db(db: Optional[Database]) -> None:
    """Swap the document database (tests pass a mongomock database)."""
    global _db
    _db = db


def get_collection(name: str) -> Collection:
    """
    Get a specific collection.
    Collections we use:
    - interview_sessions: Mock/real interview attempts
    - resume_analyses: Resume scoring results
    """
    db = get_mongo_db()
    return db[name]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except Exception as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "interviews": "interview_sessions",
    "resume_analyses": "resume_analyses",
}


def init_mongo_indexes():
    """
    Create indexes for better query performance.
    Call this once during app startup.
    """
    db = get_mongo_db()

    # Latest-first lookups per student
    db[COLLECTIONS["interviews"]].create_index([("student_id", 1), ("created_at", -1)])
    db[COLLECTIONS["resume_analyses"]].create_index([("student_id", 1), ("created_at", -1)])

    logger.info("MongoDB indexes created successfully")
