from datetime import date, datetime, timezone as dt_timezone
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.contrib.sessions.backends.cache import SessionStore
from django.test import RequestFactory


@pytest.fixture
def make_request():
    """Build a GET request carrying a fresh session and the given user."""

    def _make(path="/members/", params=None, user=None, session=None):
        request = RequestFactory().get(path, params or {})
        request.session = session if session is not None else SessionStore()
        request.user = user if user is not None else AnonymousUser()
        return request

    return _make


@pytest.fixture
def user(db):
    User = get_user_model()
    return User.objects.create_user(username="grid_user", password="pass12345")


@pytest.fixture
def staff_user(db):
    User = get_user_model()
    return User.objects.create_superuser(
        username="grid_admin", email="grid_admin@example.com", password="pass12345"
    )


@pytest.fixture
def members(db):
    """Five members spread over two teams with distinct creation dates."""
    from test_app.models import Member, Tag, Team

    core = Team.objects.create(name="Core", city="Lyon")
    ops = Team.objects.create(name="Operations", city="Paris")
    python = Tag.objects.create(name="python")
    django = Tag.objects.create(name="django")

    rows = [
        ("Alice", "alice@example.com", "active", True, core, "2024-01-10"),
        ("Bob", "bob@example.com", "invited", False, core, "2024-02-10"),
        ("Carol", None, "archived", False, ops, "2024-03-10"),
        ("Dave", "dave@example.com", "active", False, None, "2024-04-10"),
        ("Eve", "eve@example.com", "active", False, ops, "2024-05-10"),
    ]
    created = {}
    for index, (name, email, status, is_admin, team, day) in enumerate(rows):
        year, month, day_of_month = (int(part) for part in day.split("-"))
        created[name] = Member.objects.create(
            name=name,
            email=email,
            status=status,
            is_admin=is_admin,
            team=team,
            bio=f"<p>{name} bio</p>",
            salary=Decimal("1000.00") * (index + 1),
            joined_on=date(year, month, day_of_month),
            created_at=datetime(year, month, day_of_month, 9, 30, tzinfo=dt_timezone.utc),
        )
    created["Alice"].tags.add(python, django)
    created["Bob"].tags.add(python)
    return created
