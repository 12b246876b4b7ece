"""User record as seen by the order engine.

Account management lives elsewhere; orders only need the owner's id and
display name.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    id: int | None
    name: str
    email: str
    is_active: bool = True
