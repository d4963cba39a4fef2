#!/usr/bin/env python3
"""
Create an administrator account.

    python create_user.py
"""

import getpass
import sys

import config
from db import init_db
from errors import ValidationError
from services.auth_service import register_user


def main() -> int:
    print("\n=== Vytvorenie nového používateľa ===\n")
    username = input("Používateľské meno: ").strip()
    password = getpass.getpass(f"Heslo (min. {config.MIN_PASSWORD_LENGTH} znakov): ")

    db = init_db(config.DB_URL)
    session = db.session()
    try:
        user = register_user(session, username, password)
        session.commit()
    except ValidationError as exc:
        session.rollback()
        print(f"Chyba: {exc.message}")
        return 1
    finally:
        session.close()
        db.dispose()

    print(f"\n✅ Používateľ \"{user.username}\" bol úspešne vytvorený!")
    print(f"Prihlásenie: POST http://{config.HOST}:{config.PORT}/api/v1/auth/login\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
