# ticketdesk

A small ticket reservation backend. It keeps users, event tickets and
reservations in one SQLite file and provides the logic behind a set of
reservation screens: which tickets a user may still book, booking and
cancelling them, the lines shown for a ticket, and the lines shown on a
user's profile.

The package needs nothing beyond the Python standard library (3.10 or later).

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Storage: `ticketdesk.database`

`TicketDatabase(path="tms.db")` works on the SQLite file at `path`. Each
method opens its own connection and commits before returning. The `users`,
`tickets` and `reservations` tables are created by the first
`register_user`, `insert_ticket` and `insert_reservation` call respectively.
Until then, the methods that read a table treat it as empty: `user_exists`,
`login_user` and `has_user_reserved` return `False`, and `load_tickets`,
`load_reservations` and `get_user_info` return an empty list.

```python
from ticketdesk.database import TicketDatabase

db = TicketDatabase("tms.db")
password = "password"
db.register_user("alice", "alice@example.com", password)
assert db.user_exists("alice")
assert db.login_user("alice", password)

db.insert_ticket("Concert", "Open air", "2025-06-01", 100, "Music")
ticket = db.load_tickets()[0]

db.insert_reservation("alice", ticket.id)
db.decrement_ticket_count(ticket.id)
print(db.has_user_reserved("alice", ticket.id))    # True
print(db.get_user_ticket_count("alice"))           # 1

db.cancel_user_ticket("alice", ticket.id)          # the place goes back to the ticket
```

Notes on behaviour:

- Usernames are not unique. `login_user` compares the password with the
  first stored user of that name. Passwords are stored and compared as
  plain text.
- `decrement_ticket_count` leaves a ticket that has no places left
  unchanged.
- `cancel_user_ticket` deletes the user's reservations of that ticket and
  adds one place back to the ticket.
- `load_reservations("admin")` returns every user's reservations. For any
  other name it returns only that user's reservations. Each reservation
  carries the ticket's title, description, date and category.
- `get_user_ticket_count` raises `DatabaseError` when there is no
  `reservations` table yet.
- `update_user_info(old_username, new_username, email, password)` rewrites
  the name, e-mail and password of the matching users.
- Any SQLite error is raised as `DatabaseError`.

Rows are returned as the frozen dataclasses `Ticket`, `Reservation` and
`UserInfo`. Missing text columns come back as empty strings.

## Screen logic: `ticketdesk.views`

- `Session(username=None)` holds the name of the user who is signed in.
  Its `is_admin` property is true for `"admin"`.
- `reserve_state(db, username, ticket_id, count)` returns a `ReserveState`:
  - `ADMIN` for the admin account;
  - `RESERVED` if the user already holds the ticket;
  - `SOLD_OUT` if `count` is zero or less;
  - `AVAILABLE` otherwise.

  The state's `label` is the button text, and `enabled` is true only for
  `AVAILABLE`.
- `ticket_lines(ticket)` returns the five text lines shown for a ticket:
  the title, then `Data: dd.mm.yyyy`, `Opis: …`, `Liczba miejsc: …` and
  `Kategoria: …`.
- `reserve_ticket(db, username, ticket_id)` records the reservation and
  takes one place from the ticket. The place is taken even if recording the
  reservation fails. If the user already holds the ticket, it raises
  `AlreadyReservedError` and changes nothing.
- `profile_lines(db, username)` returns the name, e-mail and ticket-count
  lines of the profile screen. It falls back to `[Nie wczytano]` when the
  data cannot be read. The count line is empty for the admin.
- `reservations_for(db, username)` returns `ReservationEntry` items whose
  `date` is a parsed `datetime`.

Dates are accepted in ISO form (`2025-06-01`, optionally with a time) and as
`dd.mm.yyyy`, `yyyy/mm/dd` or `mm/dd/yyyy`, optionally followed by a time.
`ticket_lines` and `reservations_for` raise `ValueError` for any other date
text.

## What this package does not do

There is no graphical interface and no command to run. The package offers no
login, registration, ticket-entry or profile-editing screens. It provides the
storage and the rules that such a front end would call.