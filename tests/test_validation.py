import pytest

from core.validation import (
    is_valid_email,
    password_policy_errors,
    password_strength_errors,
    validate_auth_form,
)


@pytest.mark.parametrize(
    "email,expected",
    [
        ("user@example.com", True),
        ("User.Name+tag@example.co.uk", True),
        ("  user@example.com  ", True),  # trims spaces
        ("bademail", False),
        ("", False),
        (None, False),
        ("user@no-tld", False),
        ("user @example.com", False),
        ("@gmail.com", False),
        ("user@@example.com", False),
        ("name@mail.example-domain.co.uk", True),
    ],
)
def test_is_valid_email(email, expected):
    assert is_valid_email(email) is expected


@pytest.mark.parametrize(
    "pw,expected",
    [
        ("abcdefgh", []),
        ("Passw0rd!", []),
        ("short", ["Password must be at least 8 characters long"]),
        ("", ["Password must be at least 8 characters long"]),
        ("a" * 73, ["Password must be at most 72 bytes long"]),
    ],
)
def test_password_policy_minimum(pw, expected):
    assert password_policy_errors(pw) == expected


def test_password_strength_reports_every_rule():
    assert password_strength_errors("abc") == [
        "Password must be at least 8 characters long",
        "Password must contain at least one uppercase letter",
        "Password must contain at least one number",
        "Password must contain at least one special character",
    ]
    assert password_strength_errors("ABCDEFGH") == [
        "Password must contain at least one lowercase letter",
        "Password must contain at least one number",
        "Password must contain at least one special character",
    ]
    assert password_strength_errors("Passw0rd!") == []


def test_validate_auth_form_first_problem_per_field():
    errors = validate_auth_form(email="nope", password="abc", confirm_password="abd")
    assert errors == {
        "email": "Please enter a valid email address",
        "password": "Password must be at least 8 characters long",
        "confirm_password": "Passwords do not match",
    }


def test_validate_auth_form_required_and_skipped_fields():
    assert validate_auth_form(email="  ", password="", confirm_password="") == {
        "email": "Email is required",
        "password": "Password is required",
        "confirm_password": "Please confirm your password",
    }
    assert validate_auth_form(email="a@b.com") == {}
    assert validate_auth_form(email="a@b.com", password="Passw0rd!", confirm_password="Passw0rd!") == {}
