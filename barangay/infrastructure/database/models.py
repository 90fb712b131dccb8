from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(80), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(40), nullable=False, default="staff")
    designation = Column(String(120))
    email = Column(String(255))
    pic = Column(Text)  # data URI or URL
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)


class Resident(Base):
    __tablename__ = "residents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    pic = Column(Text)
    first_name = Column(String(120), nullable=False)
    last_name = Column(String(120), nullable=False)
    birth_date = Column(Date)
    purok = Column(String(120))
    house_number = Column(String(60))
    phone_number = Column(String(40), unique=True)
    civil_status = Column(String(40))
    is_indigent = Column(Boolean, nullable=False, default=False)
    is_senior_citizen = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)


class DocumentTemplate(Base):
    __tablename__ = "document_templates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    layout_settings = Column(JSON, nullable=False)  # key -> {label, x, y, fontSize, isBold, ...}
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)


class Certificate(Base):
    __tablename__ = "certificates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    template_id = Column(Integer, ForeignKey("document_templates.id", ondelete="SET NULL"))
    resident_id = Column(Integer, ForeignKey("residents.id", ondelete="SET NULL"))
    template_name = Column(String(255), nullable=False)
    layout = Column(JSON, nullable=False)  # layout after substitution, as printed
    file_url = Column(Text)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
