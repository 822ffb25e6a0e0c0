"""SQLite storage for users, tickets and reservations."""

from __future__ import annotations

import sqlite3
from contextlib import closing, contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

DEFAULT_PATH = "tms.db"
ADMIN_USERNAME = "admin"

_CREATE_USERS = (
    "CREATE TABLE IF NOT EXISTS users ("
    "id INTEGER PRIMARY KEY AUTOINCREMENT,"
    "username TEXT NOT NULL,"
    "email TEXT NOT NULL,"
    "password TEXT NOT NULL);"
)

_CREATE_TICKETS = (
    "CREATE TABLE IF NOT EXISTS tickets ("
    "id INTEGER PRIMARY KEY AUTOINCREMENT,"
    "title TEXT NOT NULL,"
    "description TEXT,"
    "date TEXT NOT NULL,"
    "count INTEGER NOT NULL,"
    "category TEXT"
    ");"
)

_CREATE_RESERVATIONS = (
    "CREATE TABLE IF NOT EXISTS reservations ("
    "id INTEGER PRIMARY KEY AUTOINCREMENT, "
    "username TEXT NOT NULL, "
    "ticket_id INTEGER NOT NULL);"
)

_RESERVATIONS_QUERY = (
    "SELECT r.ticket_id, r.username, t.title, t.description, t.date, t.category "
    "FROM reservations r "
    "JOIN tickets t ON r.ticket_id = t.id"
)


class DatabaseError(Exception):
    """Raised when the database cannot carry out a request."""


@dataclass(frozen=True)
class Ticket:
    id: int
    title: str
    description: str
    date: str
    count: int
    category: str


@dataclass(frozen=True)
class Reservation:
    ticket_id: int
    username: str
    title: str
    description: str
    date: str
    category: str


@dataclass(frozen=True)
class UserInfo:
    username: str
    email: str
    password: str


def _text(value: object) -> str:
    return "" if value is None else str(value)


class TicketDatabase:
    """Access to the ticket system's SQLite file; each call opens its own connection."""

    def __init__(self, path: str | Path = DEFAULT_PATH) -> None:
        self.path = Path(path)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            with closing(sqlite3.connect(self.path)) as conn:
                with conn:
                    yield conn
        except sqlite3.Error as exc:
            raise DatabaseError(str(exc)) from exc

    @staticmethod
    def _has_table(conn: sqlite3.Connection, name: str) -> bool:
        row = conn.execute(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?", (name,)
        ).fetchone()
        return row is not None

    def register_user(self, username: str, email: str, password: str) -> None:
        """Add a user, creating the users table if needed."""
        with self._connect() as conn:
            conn.execute(_CREATE_USERS)
            conn.execute(
                "INSERT INTO users (username, email, password) VALUES (?, ?, ?);",
                (username, email, password),
            )

    def user_exists(self, username: str) -> bool:
        with self._connect() as conn:
            if not self._has_table(conn, "users"):
                return False
            (count,) = conn.execute(
                "SELECT COUNT(*) FROM users WHERE username = ?;", (username,)
            ).fetchone()
            return count > 0

    def login_user(self, username: str, password: str) -> bool:
        """Check the password against the first user stored under that name."""
        with self._connect() as conn:
            if not self._has_table(conn, "users"):
                return False
            row = conn.execute(
                "SELECT password FROM users WHERE username = ?;", (username,)
            ).fetchone()
            return row is not None and row[0] is not None and row[0] == password

    def insert_ticket(
        self, title: str, description: str, date: str, count: int, category: str
    ) -> None:
        """Add a ticket offer, creating the tickets table if needed."""
        with self._connect() as conn:
            conn.execute(_CREATE_TICKETS)
            conn.execute(
                "INSERT INTO tickets (title, description, date, count, category) "
                "VALUES (?, ?, ?, ?, ?)",
                (title, description, date, int(count), category),
            )

    def load_tickets(self) -> list[Ticket]:
        with self._connect() as conn:
            if not self._has_table(conn, "tickets"):
                return []
            rows = conn.execute(
                "SELECT id, title, description, date, count, category FROM tickets"
            ).fetchall()
        return [
            Ticket(
                id=row[0],
                title=_text(row[1]),
                description=_text(row[2]),
                date=_text(row[3]),
                count=row[4],
                category=_text(row[5]),
            )
            for row in rows
        ]

    def insert_reservation(self, username: str, ticket_id: int) -> None:
        """Record a reservation, creating the reservations table if needed."""
        with self._connect() as conn:
            conn.execute(_CREATE_RESERVATIONS)
            conn.execute(
                "INSERT INTO reservations (username, ticket_id) VALUES (?, ?);",
                (username, int(ticket_id)),
            )

    def decrement_ticket_count(self, ticket_id: int) -> None:
        """Take one place from a ticket; a ticket with no places left is unchanged."""
        with self._connect() as conn:
            conn.execute(
                "UPDATE tickets SET count = count - 1 WHERE id = ? AND count > 0;",
                (int(ticket_id),),
            )

    def has_user_reserved(self, username: str, ticket_id: int) -> bool:
        with self._connect() as conn:
            if not self._has_table(conn, "reservations"):
                return False
            (count,) = conn.execute(
                "SELECT COUNT(*) FROM reservations WHERE username = ? AND ticket_id = ?",
                (username, int(ticket_id)),
            ).fetchone()
            return count > 0

    def load_reservations(self, username: str) -> list[Reservation]:
        """Reservations of one user, or of everyone for the admin account."""
        with self._connect() as conn:
            if not (
                self._has_table(conn, "reservations") and self._has_table(conn, "tickets")
            ):
                return []
            if username == ADMIN_USERNAME:
                rows = conn.execute(_RESERVATIONS_QUERY).fetchall()
            else:
                rows = conn.execute(
                    _RESERVATIONS_QUERY + " WHERE r.username = ?", (username,)
                ).fetchall()
        return [
            Reservation(
                ticket_id=row[0],
                username=_text(row[1]),
                title=_text(row[2]),
                description=_text(row[3]),
                date=_text(row[4]),
                category=_text(row[5]),
            )
            for row in rows
        ]

    def get_user_ticket_count(self, username: str) -> int:
        """Number of reservations held by a user."""
        with self._connect() as conn:
            if not self._has_table(conn, "reservations"):
                raise DatabaseError("no such table: reservations")
            (count,) = conn.execute(
                "SELECT count() FROM reservations WHERE username = ?", (username,)
            ).fetchone()
            return count

    def get_user_info(self, username: str) -> list[UserInfo]:
        with self._connect() as conn:
            if not self._has_table(conn, "users"):
                return []
            rows = conn.execute(
                "SELECT username, email, password FROM users WHERE username = ?",
                (username,),
            ).fetchall()
        return [
            UserInfo(username=_text(row[0]), email=_text(row[1]), password=_text(row[2]))
            for row in rows
        ]

    def update_user_info(
        self, old_username: str, new_username: str, email: str, password: str
    ) -> None:
        with self._connect() as conn:
            conn.execute(
                "UPDATE users SET username = ?, email = ?, password = ? WHERE username = ?",
                (new_username, email, password, old_username),
            )

    def cancel_user_ticket(self, username: str, ticket_id: int) -> None:
        """Remove a user's reservation and give the place back to the ticket."""
        with self._connect() as conn:
            if self._has_table(conn, "reservations"):
                conn.execute(
                    "DELETE FROM reservations WHERE username = ? AND ticket_id = ?",
                    (username, int(ticket_id)),
                )
            if self._has_table(conn, "tickets"):
                conn.execute(
                    "UPDATE tickets SET count = count + 1 WHERE id = ?", (int(ticket_id),)
                )