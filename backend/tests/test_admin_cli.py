"""Operator CLI"""
import sys
import uuid
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "tools"))

import pytest

import admin


@pytest.fixture
def email():
    return f"ops-{uuid.uuid4().hex[:8]}@example.com"


def test_create_user_and_grant_admin(email, capsys):
    assert admin.main(["user", email, "create", "s3cret-pass", "Ops"]) == 0
    assert admin.main(["user", email, "role", "admin"]) == 0

    out = capsys.readouterr().out
    assert f"Created user {email}" in out
    assert f"{email}: student -> admin" in out


def test_unknown_user_exits_with_error(capsys):
    assert admin.main(["user", "nobody@example.com", "disable"]) == 1
    assert "User not found" in capsys.readouterr().err


def test_unknown_role_is_rejected(email, capsys):
    admin.main(["user", email, "create", "s3cret-pass"])

    assert admin.main(["user", email, "role", "superuser"]) == 1
    assert "Unknown role" in capsys.readouterr().err


def test_approve_unknown_center(capsys):
    assert admin.main(["approve", "987654"]) == 1
    assert "Center not found" in capsys.readouterr().err


def test_bad_usage_exits():
    with pytest.raises(SystemExit):
        admin.main(["approve", "abc"])
