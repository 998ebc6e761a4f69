"""Example: the four sqlitebridge commands, as a host application calls them.

Run:
    python examples/example.py
"""

import os
import tempfile

from sqlitebridge import Commands, Database


def main():
    db_path = os.path.join(tempfile.gettempdir(), "sqlitebridge_example.db")
    if os.path.exists(db_path):
        os.unlink(db_path)

    commands = Commands()
    db = Database.open(db_path, commands)

    # Plain execute: no parameters, several statements allowed.
    db.execute("""
        CREATE TABLE users (
            id     INTEGER PRIMARY KEY,
            name   TEXT NOT NULL,
            active INTEGER,
            avatar BLOB
        );
    """)

    # Batch bind: one prepared statement, one step per row.
    db.execute(
        "INSERT INTO users (name, active) VALUES (?, ?)",
        [["Alice", True], ["Bob", False], ["Carol", True]],
    )

    # Flat bind.
    db.execute("UPDATE users SET avatar = x'89504e47' WHERE name = ?", ["Alice"])

    print("Active users:")
    for row in db.select("SELECT id, name, avatar FROM users WHERE active = ? ORDER BY id", [True]):
        print(f"  id={row['id']}  name={row['name']}  avatar={row['avatar']}")

    # Errors come back as structured replies through invoke().
    reply = commands.invoke("select", path="missing.db", sql="SELECT 1", values=[])
    print(f"\nReply for an unopened path: {reply.to_dict()}")

    commands.close()
    os.unlink(db_path)
    print("\nDone.")


if __name__ == "__main__":
    main()
