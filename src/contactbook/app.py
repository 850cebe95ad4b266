# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.orm import Session

from contactbook.auth.session import SessionStore
from contactbook.auth.users import authenticate, register
from contactbook.config import Settings
from contactbook.core.log import configure_logging, log_requests
from contactbook.errors import AppError, NotFound
from contactbook.infra import contacts_repo as repo
from contactbook.infra.db import get_db, init_db, make_engine, make_session_factory
from contactbook.infra.models import Contact, Note
from contactbook.permissions import current_user_id, redirect_authed_user, require_user_id, safe_redirect
from contactbook.schemas import ContactForm, JoinForm, LoginForm, NoteForm, parse_form

logger = logging.getLogger(__name__)

CONTACTS_PATH = "/contacts"


def _contact_summary(c: Contact) -> dict:
    return {
        "id": c.id,
        "first_name": c.first_name,
        "last_name": c.last_name,
        "avatar_url": c.avatar_url,
        "favorite": c.favorite,
    }


def _contact_detail(c: Contact) -> dict:
    out = _contact_summary(c)
    for name in repo.CONTACT_FIELDS:
        out[name] = getattr(c, name)
    return out


def _note(n: Note) -> dict:
    return {
        "id": n.id,
        "title": n.title,
        "body": n.body,
        "created_at": n.created_at.isoformat() if n.created_at else None,
    }


async def _form(request: Request) -> dict:
    form = await request.form()
    return {str(k): ("" if v is None else str(v)) for k, v in form.items()}


def _see_other(url: str, set_cookie: Optional[str] = None) -> RedirectResponse:
    resp = RedirectResponse(url=url, status_code=303)
    if set_cookie:
        resp.headers.append("set-cookie", set_cookie)
    return resp


def _owned_contact(db: Session, user_id: str, contact_id: str) -> Contact:
    contact = repo.get_contact(db, user_id, contact_id)
    if not contact:
        raise NotFound("Contact")
    return contact


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    engine = make_engine(settings.database_url)
    init_db(engine)

    app = FastAPI(title="contactbook")
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)
    app.state.sessions = SessionStore(settings.session_config())

    app.middleware("http")(log_requests)

    @app.exception_handler(AppError)
    async def _app_error(request: Request, exc: AppError):
        if exc.status >= 500:
            logger.error(f"{exc.code} on {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse(status_code=int(exc.status), content=exc.to_dict())

    # ------------------ Public pages ------------------

    @app.get("/")
    def index(request: Request):
        redirect_authed_user(request, CONTACTS_PATH)
        return JSONResponse(None)

    @app.get("/login")
    def login_get(request: Request):
        redirect_authed_user(request, CONTACTS_PATH)
        return JSONResponse(None)

    @app.get("/join")
    def join_get(request: Request):
        redirect_authed_user(request, CONTACTS_PATH)
        return JSONResponse(None)

    @app.post("/login")
    async def login_post(request: Request, db: Session = Depends(get_db)):
        data = parse_form(LoginForm, await _form(request))
        user = await authenticate(db, data.email, data.password, params=settings.hash_params)
        cookie = app.state.sessions.create_session(user.id, remember=data.remember)
        logger.info("user %s logged in", user.id)
        return _see_other(safe_redirect(request.query_params.get("redirectTo"), CONTACTS_PATH), cookie)

    @app.post("/join")
    async def join_post(request: Request, db: Session = Depends(get_db)):
        data = parse_form(JoinForm, await _form(request))
        user = await register(db, data.email, data.password, params=settings.hash_params)
        cookie = app.state.sessions.create_session(user.id, remember=False)
        return _see_other(safe_redirect(request.query_params.get("redirectTo"), CONTACTS_PATH), cookie)

    @app.get("/logout")
    def logout_get():
        return _see_other("/")

    @app.post("/logout")
    def logout_post(request: Request):
        logger.info("user %s logged out", current_user_id(request))
        return _see_other("/", app.state.sessions.destroy_session())

    # ------------------ Contacts ------------------

    @app.get("/contacts")
    def contacts_list(q: str = "", user_id: str = Depends(require_user_id), db: Session = Depends(get_db)):
        contacts = repo.list_contacts(db, user_id, query=q)
        return {
            "contacts": [_contact_summary(c) for c in contacts],
            "contacts_count": repo.count_contacts(db, user_id),
        }

    @app.post("/contacts")
    def contacts_create(user_id: str = Depends(require_user_id), db: Session = Depends(get_db)):
        contact = repo.create_contact(db, user_id)
        return _see_other(f"/contacts/{contact.id}/edit")

    @app.get("/contacts/{contact_id}")
    def contact_get(contact_id: str, user_id: str = Depends(require_user_id), db: Session = Depends(get_db)):
        return {"contact": _contact_detail(_owned_contact(db, user_id, contact_id))}

    @app.post("/contacts/{contact_id}")
    async def contact_action(
        request: Request,
        contact_id: str,
        user_id: str = Depends(require_user_id),
        db: Session = Depends(get_db),
    ):
        contact = _owned_contact(db, user_id, contact_id)
        intent = (await _form(request)).get("intent", "")
        if intent == "favorite":
            repo.toggle_favorite(db, contact)
            return JSONResponse(None)
        if intent == "delete":
            repo.delete_contact(db, contact)
            return _see_other(CONTACTS_PATH)
        raise HTTPException(status_code=400, detail=f'Unexpected operation by the intent of "{intent}"')

    @app.get("/contacts/{contact_id}/edit")
    def contact_edit_get(contact_id: str, user_id: str = Depends(require_user_id), db: Session = Depends(get_db)):
        return {"contact": _contact_detail(_owned_contact(db, user_id, contact_id))}

    @app.post("/contacts/{contact_id}/edit")
    async def contact_edit_post(
        request: Request,
        contact_id: str,
        user_id: str = Depends(require_user_id),
        db: Session = Depends(get_db),
    ):
        contact = _owned_contact(db, user_id, contact_id)
        data = parse_form(ContactForm, await _form(request))
        repo.update_contact(db, contact, data.to_fields())
        return _see_other(f"/contacts/{contact.id}")

    # ------------------ Notes ------------------

    @app.get("/contacts/{contact_id}/notes")
    def notes_list(contact_id: str, user_id: str = Depends(require_user_id), db: Session = Depends(get_db)):
        _owned_contact(db, user_id, contact_id)
        return {"notes": [_note(n) for n in repo.list_notes(db, user_id, contact_id)]}

    @app.post("/contacts/{contact_id}/notes")
    async def notes_delete(
        request: Request,
        contact_id: str,
        user_id: str = Depends(require_user_id),
        db: Session = Depends(get_db),
    ):
        note_id = (await _form(request)).get("noteId", "")
        if not note_id:
            raise HTTPException(status_code=400, detail="noteId is missing")
        note = repo.get_note(db, user_id, contact_id, note_id)
        if not note:
            raise NotFound("Note")
        repo.delete_note(db, note)
        return JSONResponse(None)

    @app.post("/contacts/{contact_id}/notes/new")
    async def notes_create(
        request: Request,
        contact_id: str,
        user_id: str = Depends(require_user_id),
        db: Session = Depends(get_db),
    ):
        contact = _owned_contact(db, user_id, contact_id)
        data = parse_form(NoteForm, await _form(request))
        repo.create_note(db, contact, title=data.title, body=data.body)
        return _see_other(f"/contacts/{contact.id}/notes")

    @app.get("/contacts/{contact_id}/notes/{note_id}/edit")
    def note_edit_get(
        contact_id: str,
        note_id: str,
        user_id: str = Depends(require_user_id),
        db: Session = Depends(get_db),
    ):
        note = repo.get_note(db, user_id, contact_id, note_id)
        if not note:
            raise NotFound("Note")
        return {"note": {"title": note.title, "body": note.body}}

    @app.post("/contacts/{contact_id}/notes/{note_id}/edit")
    async def note_edit_post(
        request: Request,
        contact_id: str,
        note_id: str,
        user_id: str = Depends(require_user_id),
        db: Session = Depends(get_db),
    ):
        note = repo.get_note(db, user_id, contact_id, note_id)
        if not note:
            raise NotFound("Note")
        data = parse_form(NoteForm, await _form(request))
        repo.update_note(db, note, title=data.title, body=data.body)
        return _see_other(f"/contacts/{contact_id}/notes")

    return app
