"""
Database Setup Script

Creates the profile and chirp tables ahead of the first deploy. The app
also does this on startup, so this is only needed when the web process
runs with a database role that can't create tables.

Usage:
    python scripts/init_db.py
"""

import asyncio
import os
import sys

# Add parent directory to Python path so we can import the twixxer package
# This allows running the script from any directory
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from twixxer.database import engine, init_models


async def main():
    await init_models()
    await engine.dispose()
    print("Tables created (existing tables were left untouched)")


if __name__ == "__main__":
    asyncio.run(main())
