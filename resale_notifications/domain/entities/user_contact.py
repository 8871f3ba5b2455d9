"""Projection of a marketplace user used for message delivery."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UserContact:
    """Contact details the email and SMS channels need."""

    id: str
    email: str
    first_name: str
    phone_number: str | None = None


__all__ = ["UserContact"]
