"""
JurisCRM Hearing Desk - Case Management Backend
===============================================

Back-office service for a legal services firm:
1. Scheduling court hearings and assigning eligible professionals
2. Tracking hearing minutes, payments and follow-up tasks

In-memory store by default; SQLAlchemy backend optional. No auth.
"""

__version__ = "1.0.0"
