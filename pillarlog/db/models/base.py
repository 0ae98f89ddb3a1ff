from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for every pillarlog table; Alembic reads its metadata."""
