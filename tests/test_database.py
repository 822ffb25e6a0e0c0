import pytest

from ticketdesk.database import (
    DatabaseError,
    Reservation,
    Ticket,
    TicketDatabase,
    UserInfo,
)


@pytest.fixture
def db(tmp_path):
    return TicketDatabase(tmp_path / "tms.db")


def _add_ticket(db, title="Concert", count=3):
    db.insert_ticket(title, "Live music", "2024-05-01", count, "Music")
    return next(t for t in db.load_tickets() if t.title == title)


def test_user_round_trip(db):
    password = "password"
    db.register_user("alice", "alice@example.com", password)
    assert db.user_exists("alice")
    assert not db.user_exists("bob")
    assert db.get_user_info("alice") == [UserInfo("alice", "alice@example.com", "password")]


def test_fresh_database_has_nothing(db):
    assert not db.user_exists("alice")
    assert not db.login_user("alice", "password")
    assert db.load_tickets() == []
    assert db.get_user_info("alice") == []
    assert db.load_reservations("alice") == []
    assert not db.has_user_reserved("alice", 1)


def test_login_checks_password(db):
    db.register_user("alice", "alice@example.com", "secret")
    assert db.login_user("alice", "secret")
    assert not db.login_user("alice", "password")
    assert not db.login_user("bob", "secret")


def test_register_rejects_missing_fields(db):
    with pytest.raises(DatabaseError):
        db.register_user("alice", None, "password")


def test_ticket_round_trip(db):
    db.insert_ticket("Concert", "Live music", "2024-05-01", 3, "Music")
    tickets = db.load_tickets()
    assert len(tickets) == 1
    ticket = tickets[0]
    assert isinstance(ticket, Ticket)
    assert (ticket.title, ticket.description, ticket.date, ticket.count, ticket.category) == (
        "Concert",
        "Live music",
        "2024-05-01",
        3,
        "Music",
    )


def test_ticket_ids_are_distinct(db):
    first = _add_ticket(db, "A")
    second = _add_ticket(db, "B")
    assert first.id != second.id
    assert [t.title for t in db.load_tickets()] == ["A", "B"]


def test_decrement_stops_at_zero(db):
    ticket = _add_ticket(db, count=1)
    db.decrement_ticket_count(ticket.id)
    db.decrement_ticket_count(ticket.id)
    assert db.load_tickets()[0].count == 0


def test_decrement_without_tickets_table_raises(db):
    with pytest.raises(DatabaseError):
        db.decrement_ticket_count(1)


def test_reservation_flow(db):
    ticket = _add_ticket(db)
    db.insert_reservation("alice", ticket.id)
    assert db.has_user_reserved("alice", ticket.id)
    assert not db.has_user_reserved("bob", ticket.id)
    assert db.get_user_ticket_count("alice") == 1
    assert db.get_user_ticket_count("bob") == 0
    assert db.load_reservations("alice") == [
        Reservation(ticket.id, "alice", "Concert", "Live music", "2024-05-01", "Music")
    ]


def test_ticket_count_without_reservations_table_raises(db):
    with pytest.raises(DatabaseError):
        db.get_user_ticket_count("alice")


def test_admin_sees_all_reservations(db):
    ticket = _add_ticket(db)
    db.insert_reservation("alice", ticket.id)
    db.insert_reservation("bob", ticket.id)
    assert {r.username for r in db.load_reservations("admin")} == {"alice", "bob"}
    assert [r.username for r in db.load_reservations("bob")] == ["bob"]


def test_cancel_returns_place(db):
    ticket = _add_ticket(db, count=2)
    db.insert_reservation("alice", ticket.id)
    db.decrement_ticket_count(ticket.id)
    db.cancel_user_ticket("alice", ticket.id)
    assert not db.has_user_reserved("alice", ticket.id)
    assert db.load_tickets()[0].count == ticket.count


def test_cancel_on_empty_database_is_harmless(db):
    db.cancel_user_ticket("alice", 1)
    assert db.load_tickets() == []


def test_update_user_info(db):
    db.register_user("alice", "alice@example.com", "password")
    db.update_user_info("alice", "alicia", "alicia@example.com", "secret")
    assert not db.user_exists("alice")
    assert db.get_user_info("alicia") == [UserInfo("alicia", "alicia@example.com", "secret")]
    assert db.login_user("alicia", "secret")


def test_update_without_users_table_raises(db):
    with pytest.raises(DatabaseError):
        db.update_user_info("alice", "alicia", "alicia@example.com", "secret")


def test_duplicate_usernames_are_kept(db):
    db.register_user("alice", "one@example.com", "password")
    db.register_user("alice", "two@example.com", "secret")
    assert [u.email for u in db.get_user_info("alice")] == ["one@example.com", "two@example.com"]
    assert db.login_user("alice", "password")
    assert not db.login_user("alice", "secret")