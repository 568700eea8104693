"""ReelVault API v1.

The mounted surface lives in `app.api.v1.routers`:

    from app.api.v1.routers import router as api_v1_router

Nothing is re-exported here so that `app.api.v1.routers` stays importable by
dotted path (dependency overrides and monkeypatching in tests).
"""

__all__ = []
