"""
sharedstore: User SQLAlchemy Model
=====================================

What:  ORM model for the `users` table shared by every user-service instance.
How:   Inherits from the declarative Base in sharedstore.database.

Lifecycle:
    Created by POST /users (id assigned by the store), then only read.
    Never updated or deleted by this system.

Constraints:
    Only what the columns declare. No uniqueness on email is enforced here;
    if the production schema adds one, a violation surfaces as a
    DatabaseError like any other store failure.
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from sharedstore.database import Base


class User(Base):
    __tablename__ = "users"

    # Auto-assigned by the store (SERIAL on PostgreSQL); listing order key
    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name='{self.name}', email='{self.email}')>"
