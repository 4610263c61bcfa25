from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class FormModel(Base):
    __tablename__ = "forms"

    id = Column(String, primary_key=True)
    public_id = Column(String, unique=True, index=True)
    name = Column(String)
    description = Column(Text)
    status = Column(String)
    version = Column(Integer, default=1)
    fields_json = Column(Text)
    created_at = Column(DateTime)
    updated_at = Column(DateTime)


class FormVersionModel(Base):
    __tablename__ = "form_versions"
    __table_args__ = (UniqueConstraint("form_id", "version"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    form_id = Column(String, index=True)
    version = Column(Integer)
    snapshot_json = Column(Text)
    created_at = Column(DateTime)


class ResponseModel(Base):
    __tablename__ = "responses"

    id = Column(String, primary_key=True)
    form_id = Column(String, index=True)
    form_version = Column(Integer)
    values_json = Column(Text)
    rating = Column(Integer, nullable=True)
    comments = Column(Text, nullable=True)
    created_at = Column(DateTime)
