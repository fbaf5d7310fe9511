#!/usr/bin/env python3
"""
Create all ForsaLink tables that don't exist yet.

Usage: python scripts/init_db.py
"""
import sys
sys.path.insert(0, '.')

from app.db.schema import init_db, metadata


def main():
    init_db()
    print(f"✅ Tables ready: {', '.join(metadata.tables)}")


if __name__ == "__main__":
    main()
