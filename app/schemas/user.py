# app/schemas/user.py
import uuid

from sqlmodel import SQLModel


class ProfileRead(SQLModel):
    """Entry of the link-profile picker."""

    id: uuid.UUID
    username: str
    title: str | None = None
