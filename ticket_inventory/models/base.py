"""Declarative base for SQLAlchemy models."""

from sqlalchemy import BigInteger, Integer
from sqlalchemy.orm import DeclarativeBase

# BIGINT on MySQL; SQLite only auto-assigns ids to INTEGER PRIMARY KEY columns
BigIntPrimaryKey = BigInteger().with_variant(Integer, "sqlite")


class Base(DeclarativeBase):
    """Base class for all models."""

    pass
