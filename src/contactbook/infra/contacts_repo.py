# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Contact and note persistence.

Every function takes the owning ``user_id`` and filters on it, so a caller
can never read or touch another user's rows; a foreign id looks missing.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from contactbook.infra.models import Contact, Note

CONTACT_FIELDS = (
    "first_name",
    "last_name",
    "avatar_url",
    "title",
    "company",
    "email",
    "phone",
    "location",
    "twitter_handle",
    "website_url",
    "linkedin_url",
    "about",
)


def count_contacts(db: Session, user_id: str) -> int:
    return db.scalar(select(func.count(Contact.id)).where(Contact.user_id == user_id)) or 0


def list_contacts(db: Session, user_id: str, *, query: Optional[str] = None) -> List[Contact]:
    stmt = select(Contact).where(Contact.user_id == user_id)
    q = (query or "").strip()
    if q:
        # Literal match: % and _ in the query are not wildcards.
        stmt = stmt.where(
            or_(
                Contact.first_name.icontains(q, autoescape=True),
                Contact.last_name.icontains(q, autoescape=True),
            )
        )
    # NULLs (unnamed contacts) sort after named ones.
    stmt = stmt.order_by(Contact.last_name.is_(None), Contact.last_name.asc(), Contact.created_at.asc())
    return list(db.scalars(stmt))


def get_contact(db: Session, user_id: str, contact_id: str) -> Optional[Contact]:
    return db.scalar(select(Contact).where(Contact.id == contact_id, Contact.user_id == user_id))


def create_contact(db: Session, user_id: str, fields: Optional[Dict[str, Any]] = None) -> Contact:
    contact = Contact(user_id=user_id)
    for name, value in (fields or {}).items():
        if name in CONTACT_FIELDS:
            setattr(contact, name, value)
    db.add(contact)
    db.commit()
    return contact


def update_contact(db: Session, contact: Contact, fields: Dict[str, Any]) -> Contact:
    for name, value in fields.items():
        if name in CONTACT_FIELDS:
            setattr(contact, name, value)
    db.commit()
    return contact


def toggle_favorite(db: Session, contact: Contact) -> Contact:
    contact.favorite = not contact.favorite
    db.commit()
    return contact


def delete_contact(db: Session, contact: Contact) -> None:
    db.delete(contact)
    db.commit()


def list_notes(db: Session, user_id: str, contact_id: str) -> List[Note]:
    stmt = (
        select(Note)
        .join(Contact, Note.contact_id == Contact.id)
        .where(Note.contact_id == contact_id, Contact.user_id == user_id)
        .order_by(Note.created_at.desc())
    )
    return list(db.scalars(stmt))


def get_note(db: Session, user_id: str, contact_id: str, note_id: str) -> Optional[Note]:
    stmt = (
        select(Note)
        .join(Contact, Note.contact_id == Contact.id)
        .where(Note.id == note_id, Note.contact_id == contact_id, Contact.user_id == user_id)
    )
    return db.scalar(stmt)


def create_note(db: Session, contact: Contact, *, title: str, body: str) -> Note:
    note = Note(contact_id=contact.id, title=title, body=body)
    db.add(note)
    db.commit()
    return note


def update_note(db: Session, note: Note, *, title: str, body: str) -> Note:
    note.title = title
    note.body = body
    db.commit()
    return note


def delete_note(db: Session, note: Note) -> None:
    db.delete(note)
    db.commit()
