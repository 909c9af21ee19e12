#!/usr/bin/env python3
"""
Database initialization script: seeds the built-in themes and, when
ADMIN_EMAIL and ADMIN_PASSWORD are set, the first admin user.
"""

import asyncio
import os
import sys

# Add the project root to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from portfolio.core.config import settings
from portfolio.core.database import connect_to_mongo, close_mongo_connection
from portfolio.core.exceptions import ConflictError
from portfolio.core.logging_config import setup_logging
from portfolio.services.auth_service import AuthService
from portfolio.services.theme_service import theme_service


async def init_database():
    setup_logging(settings.LOG_LEVEL)
    await connect_to_mongo()
    print(f"Connected to MongoDB at {settings.MONGODB_URL}")

    try:
        created = await theme_service.seed_default_themes()
        print(f"Seeded {len(created)} themes")

        active = await theme_service.get_active_theme()
        print(f"Active theme: {active.name if active else 'none'}")

        email = os.getenv("ADMIN_EMAIL")
        password = os.getenv("ADMIN_PASSWORD")
        if email and password:
            try:
                await AuthService.create_admin_user(os.getenv("ADMIN_NAME", "Admin"), email, password)
                print(f"Created admin user {email}")
            except ConflictError:
                print(f"Admin user {email} already exists")
    finally:
        await close_mongo_connection()


if __name__ == "__main__":
    asyncio.run(init_database())
