"""Declarative base for psg tables."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
