"""
Service layer for the HTTP API.

Provides:
- MissionRunner: background mission execution and status tracking
"""
