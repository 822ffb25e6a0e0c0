"""Screen logic for tickets, reservations and the user profile."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from ticketdesk.database import (
    ADMIN_USERNAME,
    DatabaseError,
    Ticket,
    TicketDatabase,
)

NOT_LOADED = "[Nie wczytano]"
ALREADY_RESERVED_MESSAGE = "Już zarezerwowałeś ten bilet."

_DATE_FORMATS = (
    "%d.%m.%Y",
    "%d.%m.%Y %H:%M",
    "%d.%m.%Y %H:%M:%S",
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M:%S",
)


def _parse_date(text: str) -> datetime:
    """Parse a stored date string; raise ValueError if it is not a date."""
    value = text.strip()
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    raise ValueError(f"not a recognised date: {text!r}")


def _short_date(moment: datetime) -> str:
    return moment.strftime("%d.%m.%Y")


@dataclass
class Session:
    """The user currently signed in, if any."""

    username: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.username == ADMIN_USERNAME


class ReserveState(Enum):
    """What the reserve button of a ticket shows; its value is the button text."""

    AVAILABLE = "Rezerwuj"
    ADMIN = "Brak dostępu"
    RESERVED = "Zarezerwowano"
    SOLD_OUT = "Brak miejsc"

    @property
    def label(self) -> str:
        return self.value

    @property
    def enabled(self) -> bool:
        return self is ReserveState.AVAILABLE


class AlreadyReservedError(Exception):
    """Raised when a user tries to reserve a ticket a second time."""

    def __init__(self, username: str, ticket_id: int) -> None:
        super().__init__(ALREADY_RESERVED_MESSAGE)
        self.username = username
        self.ticket_id = ticket_id


@dataclass(frozen=True)
class ReservationEntry:
    """A reservation as listed on the reservations screen."""

    ticket_id: int
    username: str
    title: str
    description: str
    date: datetime
    category: str


def reserve_state(
    db: TicketDatabase, username: str, ticket_id: int, count: int
) -> ReserveState:
    """Decide whether a user may reserve a ticket and why not."""
    if username == ADMIN_USERNAME:
        return ReserveState.ADMIN
    if db.has_user_reserved(username, ticket_id):
        return ReserveState.RESERVED
    if count <= 0:
        return ReserveState.SOLD_OUT
    return ReserveState.AVAILABLE


def ticket_lines(ticket: Ticket) -> list[str]:
    """The text lines shown for one ticket offer."""
    return [
        ticket.title,
        "Data: " + _short_date(_parse_date(ticket.date)),
        "Opis: " + ticket.description,
        f"Liczba miejsc: {ticket.count}",
        "Kategoria: " + ticket.category,
    ]


def reserve_ticket(db: TicketDatabase, username: str, ticket_id: int) -> None:
    """Reserve a ticket for a user and take one place from it."""
    if db.has_user_reserved(username, ticket_id):
        raise AlreadyReservedError(username, ticket_id)
    try:
        db.insert_reservation(username, ticket_id)
    finally:
        db.decrement_ticket_count(ticket_id)


def profile_lines(db: TicketDatabase, username: str) -> tuple[str, str, str]:
    """The name, e-mail and ticket-count lines of the profile screen."""
    try:
        info = db.get_user_info(username)
    except DatabaseError:
        info = []

    if info:
        user = info[0]
        name_line = "Nazwa: " + user.username
        email_line = "E-Mail: " + user.email
    else:
        name_line = "Nazwa: " + NOT_LOADED
        email_line = "E-Mail: " + NOT_LOADED

    if username == ADMIN_USERNAME:
        count_line = ""
    else:
        try:
            count_line = f"Posiadane bilety: {db.get_user_ticket_count(username)}"
        except DatabaseError:
            count_line = "Posiadane bilety: " + NOT_LOADED

    return name_line, email_line, count_line


def reservations_for(db: TicketDatabase, username: str) -> list[ReservationEntry]:
    """Reservations visible to a user, with their dates parsed."""
    return [
        ReservationEntry(
            ticket_id=r.ticket_id,
            username=r.username,
            title=r.title,
            description=r.description,
            date=_parse_date(r.date),
            category=r.category,
        )
        for r in db.load_reservations(username)
    ]