#!/usr/bin/env python3
from __future__ import annotations

from getpass import getpass

from contactbook.auth.users import create_user_sync
from contactbook.config import Settings
from contactbook.errors import EmailTaken
from contactbook.infra.db import init_db, make_engine, make_session_factory


def main() -> None:
    settings = Settings.from_env()
    engine = make_engine(settings.database_url)
    init_db(engine)

    email = input("Email: ").strip()
    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")
    if len(pw1.strip()) < 8:
        raise SystemExit("Password must be at least 8 characters")

    db = make_session_factory(engine)()
    try:
        user = create_user_sync(db, email, pw1.strip(), params=settings.hash_params)
    except EmailTaken:
        raise SystemExit("A user with this email already exists")
    finally:
        db.close()
    print(f"OK -> {user.id} ({settings.database_url})")


if __name__ == "__main__":
    main()
