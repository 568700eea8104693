# tests/conftest.py
"""
Global test bootstrap
- Sets the environment the app settings need BEFORE anything imports `app`
- Points uploads at a throwaway directory for the whole run
- Pulls in the fixture modules (db, storage/app, auth, videos)
"""

from __future__ import annotations

import os
import tempfile

# ──────────────────────────────────────────────────────────────────────────────
# 🌱 Test env (must run before `app.core.config` is imported)
# ──────────────────────────────────────────────────────────────────────────────
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-reelvault")
os.environ.setdefault("JWT_ALGORITHM", "HS256")
os.environ.setdefault("LOG_TO_FILE", "0")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="reelvault-uploads-"))
os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite+aiosqlite:///:memory:")

# ──────────────────────────────────────────────────────────────────────────────
# 📦 Fixtures
# ──────────────────────────────────────────────────────────────────────────────
from tests.fixtures.db import *          # noqa: F401,F403,E402
from tests.fixtures.app import *         # noqa: F401,F403,E402
from tests.fixtures.auth import *        # noqa: F401,F403,E402
from tests.fixtures.videos import *      # noqa: F401,F403,E402
