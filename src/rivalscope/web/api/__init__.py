"""
API endpoints for the rivalscope server.

Provides REST endpoints for:
- Missions (POST/GET /api/missions/*)
- Recurring jobs (GET/POST/DELETE /api/jobs/*)
"""
