"""Pydantic schemas package.

Folder intent:
  common.py       — CamelModel base + HealthResponse (all schemas inherit CamelModel)
  property.py     — Property request DTOs and response model
  certificate.py  — Certificate submission, output, and history schemas
  compliance.py   — Catalog, summary, attention ranking, and alert read models
"""
