"""
Pydantic schemas for user-related data carried through a request.
"""

from pydantic import BaseModel


class CurrentUser(BaseModel):
    """The logged-in user as resolved from the session cookie."""

    id: int
    name: str
    email: str

    model_config = {"from_attributes": True}
