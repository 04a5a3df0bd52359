#!/usr/bin/env python3
"""
Helper script to inspect the SQLite message log store.

Safe utility for debugging delivery statuses locally.
Prints the most recently updated message logs, optionally for one messageId.

Usage:
    python scripts/inspect_message_logs.py [--db PATH] [--message-id WAMID] [--limit N]
"""

import sqlite3
import argparse
import json
from pathlib import Path


def inspect_database(db_path: str, message_id: str = None, limit: int = 10):
    """
    Inspect and display message logs.

    Args:
        db_path: Path to SQLite database file
        message_id: Only show logs for this messageId
        limit: Maximum number of rows to display
    """
    try:
        conn = sqlite3.connect(db_path)
        cursor = conn.cursor()

        # Check if table exists
        cursor.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='message_logs'"
        )

        if not cursor.fetchone():
            print(f"✗ Table 'message_logs' does not exist in {db_path}")
            return

        cursor.execute("SELECT COUNT(*) FROM message_logs")
        total_rows = cursor.fetchone()[0]

        print(f"Message Log Store: {db_path}")
        print(f"Total rows: {total_rows}")
        print()

        if message_id:
            cursor.execute(
                """
                SELECT id, data, version, updated_at
                FROM message_logs
                WHERE message_id = ?
                ORDER BY updated_at DESC
                LIMIT ?
                """,
                (message_id, limit),
            )
        else:
            cursor.execute(
                """
                SELECT id, data, version, updated_at
                FROM message_logs
                ORDER BY updated_at DESC
                LIMIT ?
                """,
                (limit,),
            )

        rows = cursor.fetchall()
        conn.close()

        if not rows:
            print("(No matching message logs)")
            return

        print("-" * 100)
        for i, (doc_id, data_json, version, updated_at) in enumerate(rows, 1):
            print(f"\n[{i}] Document: {doc_id} (version {version})")
            print(f"    Updated: {updated_at}")
            try:
                data = json.loads(data_json)
                print(f"    messageId:  {data.get('messageId')}")
                print(f"    checkoutId: {data.get('checkoutId')}")
                print(f"    status:     {data.get('status')} at {data.get('formattedTime')}")
                if data.get("errorCode") is not None:
                    print(f"    error:      {data.get('errorCode')} {data.get('errorMessage')}")
            except json.JSONDecodeError:
                print(f"    Data: (corrupted JSON: {data_json[:50]}...)")

        print()
        print("-" * 100)

    except sqlite3.Error as e:
        print(f"✗ Database error: {str(e)}")


def main():
    parser = argparse.ArgumentParser(description="Inspect message log store")
    parser.add_argument(
        "--db",
        default="./message_logs.db",
        help="Path to SQLite database (default: ./message_logs.db)",
    )
    parser.add_argument(
        "--message-id",
        default=None,
        help="Only show logs with this messageId",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Number of rows to display (default: 10)",
    )

    args = parser.parse_args()

    if not Path(args.db).exists():
        print(f"✗ Database file not found: {args.db}")
        return

    inspect_database(args.db, message_id=args.message_id, limit=args.limit)


if __name__ == "__main__":
    main()
