#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Direct app startup script. Reads .env, then serves iconatlas.main:app.
"""
import logging
import sys

from dotenv import load_dotenv
load_dotenv()

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

from iconatlas.config import settings

print(f"Database URL: {settings.get_database_url().split('@')[-1]}")
print(f"Iconify collections dir: {settings.ICONIFY_COLLECTIONS_DIR}")

try:
    from iconatlas.main import app  # noqa: F401
except Exception as e:
    print(f"App import failed: {e}")
    sys.exit(1)

try:
    import uvicorn
    uvicorn.run(
        "iconatlas.main:app",
        host=settings.APP_HOST,
        port=settings.APP_PORT,
        log_level="info"
    )
except Exception as e:
    print(f"Uvicorn startup failed: {e}")
    sys.exit(1)
