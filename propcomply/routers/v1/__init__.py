"""v1 router package — all /api/v1/* endpoints live here.

Files:
  jurisdictions.py  — catalog lookup (no database access)
  properties.py     — property directory CRUD
  certificates.py   — record / list / history / delete certificates
  compliance.py     — property and portfolio summaries, attention ranking, alerts

Rule: Routers only handle HTTP (request parsing, response shaping).
      All business logic delegates to propcomply/services/.
"""
