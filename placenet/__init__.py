"""
PlaceNet - Campus Placement Platform
Connects students, recruiters and placement admins.

Architecture:
- PostgreSQL: Structured data (users, profiles, jobs, applications, chat)
- MongoDB: Documents (interview sessions, resume analyses)
- WebSocket hub: Real-time chat fan-out, announcements, heartbeat
"""

__version__ = "1.0.0"
