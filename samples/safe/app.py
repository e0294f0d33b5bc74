"""Settings loader and lookup backed by parameterized queries."""

import sqlite3

import yaml


def load_settings(path):
    with open(path, encoding="utf-8") as handle:
        return yaml.load(handle, Loader=yaml.SafeLoader)


def fetch_user(conn: sqlite3.Connection, user_id: int):
    cursor = conn.cursor()
    cursor.execute("SELECT name FROM users WHERE id = ?", (user_id,))
    return cursor.fetchone()
