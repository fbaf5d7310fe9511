#!/usr/bin/env python3
"""
Print every registered user (never the password hash).

Usage: python scripts/list_users.py
"""
import sys
sys.path.insert(0, '.')

from app.db.postgres import execute_raw_sql


def main():
    users = execute_raw_sql("SELECT id, full_name, email, role, created_at FROM users ORDER BY id")
    print("--- Registered Users ---")
    if not users:
        print("(none)")
        return
    print(f"{'id':>5}  {'role':<8}  {'email':<35}  full_name")
    for u in users:
        print(f"{u['id']:>5}  {u['role']:<8}  {u['email']:<35}  {u['full_name']}")
    print(f"\nTotal: {len(users)}")


if __name__ == "__main__":
    main()
