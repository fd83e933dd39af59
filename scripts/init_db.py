#!/usr/bin/env python3
"""
Create the posts and categories tables.

Usage:
    python scripts/init_db.py
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.db import DATABASE_URL, create_db_and_tables

if __name__ == "__main__":
    print(f"Creating tables in {DATABASE_URL.split('@')[-1]}...")
    try:
        create_db_and_tables()
        print("Tables created successfully!")
    except Exception as e:
        print(f"Error creating tables: {e}")
        sys.exit(1)
