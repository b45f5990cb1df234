"""Services package — all business logic lives here, never in routers.

Files:
  compliance.py  — catalog reads, certificate recording, summaries, attention ranking, alerts
  property.py    — property directory CRUD with jurisdiction checks

Rule: routers call services, services call repositories, repositories call the DB.
      No SQLAlchemy queries in routers. No FastAPI imports in services.
"""
