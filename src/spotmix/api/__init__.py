"""HTTP API.

- routers/: endpoints (health, auth, profile, playlists, artists)
- schemas/: pydantic request/response models
- dependencies.py: session, token and service wiring
- exception_handlers.py: domain/upstream errors -> JSON responses
"""

from spotmix.api.routers import api_router

__all__ = ["api_router"]
