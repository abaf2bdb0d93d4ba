"""
User Model.

The signed-in account as reported by the hosted auth service.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class User(BaseModel):
    """Represents a user account.

    ``id`` is the hosted auth UUID; every house row stores it as
    ``user_id``.
    """

    id: str
    email: str
    full_name: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
