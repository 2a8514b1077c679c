#!/usr/bin/env python3
"""
Launcher for the IssueTracker backend.

Reads HOST, PORT, RELOAD and LOG_LEVEL from the environment (or .env) and
reports where issues and attachments will be stored before serving.
"""

import os

import uvicorn
from dotenv import load_dotenv
from sqlalchemy.engine import make_url


def server_settings() -> dict:
    load_dotenv()
    return {
        "host": os.getenv("HOST", "0.0.0.0"),
        "port": int(os.getenv("PORT", "9091")),
        "reload": os.getenv("RELOAD", "false").lower() == "true",
        "log_level": os.getenv("LOG_LEVEL", "info").lower(),
    }


def main():
    settings = server_settings()

    # Imported after .env is loaded so the store and upload dir pick it up
    from issuetracker.config.security import SecurityConfig
    from issuetracker.database import DATABASE_URL

    print("Starting IssueTracker API server...")
    print(f"Listening: {settings['host']}:{settings['port']} (reload={settings['reload']})")
    print(f"Database: {make_url(DATABASE_URL).render_as_string(hide_password=True)}")
    print(f"Uploads: {SecurityConfig.STORAGE['upload_dir']}")
    print("=" * 50)

    uvicorn.run("main:app", **settings)


if __name__ == "__main__":
    main()
