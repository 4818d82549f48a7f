"""Declarative base for storage models."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
