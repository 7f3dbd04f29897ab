#!/usr/bin/env python3
"""
Admin account management for the local backend of the school gallery.
With GALLERY_BACKEND=supabase, manage admins in the Supabase dashboard instead.

Usage:
    python scripts/manage_users.py init
    python scripts/manage_users.py add <email> <password>
    python scripts/manage_users.py list
    python scripts/manage_users.py delete <email>
    python scripts/manage_users.py passwd <email> <new_password>
"""

import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from school_gallery.database import create_connection, init_db
from school_gallery.infrastructure.repositories import BackendError, SessionRepository, UserRepository

MIN_PASSWORD_LENGTH = 6


def print_usage():
    print(__doc__)


def cmd_init(db, args):
    print("Database initialized")
    return 0


def cmd_add(db, args):
    repo = UserRepository(db)
    if len(args) < 2:
        print("Error: add requires <email> <password>")
        print("Example: python scripts/manage_users.py add admin@sekolah.sch.id rahasia123")
        return 1

    email, password = args[0], args[1]

    if "@" not in email:
        print(f"Error: '{email}' is not an email address")
        return 1

    if len(password) < MIN_PASSWORD_LENGTH:
        print(f"Error: Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return 1

    if repo.get_by_email(email):
        print(f"Error: Admin '{email}' already exists")
        return 1

    try:
        user_id = repo.create(email, password)
    except BackendError as e:
        print(f"Error creating admin: {e}")
        return 1

    print(f"Admin '{email}' created successfully (ID: {user_id})")
    return 0


def cmd_list(db, args):
    repo = UserRepository(db)
    users = repo.list_all()
    if not users:
        print("No admins found. Create one with: python scripts/manage_users.py add <email> <password>")
        return 0

    print(f"{'ID':<5} {'Email':<40} {'Created'}")
    print("-" * 70)
    for user in users:
        print(f"{user['id']:<5} {user['email']:<40} {user['created_at']}")
    return 0


def cmd_delete(db, args, confirm=input):
    repo = UserRepository(db)
    if len(args) < 1:
        print("Error: delete requires <email>")
        return 1

    email = args[0]
    user = repo.get_by_email(email)

    if not user:
        print(f"Error: Admin '{email}' not found")
        return 1

    answer = confirm(f"Delete admin '{user['email']}'? [y/N]: ")
    if answer.lower() != 'y':
        print("Cancelled")
        return 0

    repo.delete(user['id'])
    print(f"Admin '{user['email']}' deleted")
    return 0


def cmd_passwd(db, args):
    repo = UserRepository(db)
    if len(args) < 2:
        print("Error: passwd requires <email> <new_password>")
        return 1

    email, new_password = args[0], args[1]

    if len(new_password) < MIN_PASSWORD_LENGTH:
        print(f"Error: Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return 1

    user = repo.get_by_email(email)
    if not user:
        print(f"Error: Admin '{email}' not found")
        return 1

    repo.update_password(user['id'], new_password)
    # Old sessions must not outlive the old password
    ended = SessionRepository(db).delete_all_for_user(user['id'])
    print(f"Password updated for '{user['email']}' ({ended} session(s) ended)")
    return 0


COMMANDS = {
    'init': cmd_init,
    'add': cmd_add,
    'list': cmd_list,
    'delete': cmd_delete,
    'passwd': cmd_passwd,
}


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print_usage()
        return 1

    command = argv[0].lower()
    if command not in COMMANDS:
        print(f"Unknown command: {command}")
        print_usage()
        return 1

    # Initialize database
    init_db()

    db = create_connection()
    try:
        return COMMANDS[command](db, argv[1:])
    finally:
        db.close()


if __name__ == '__main__':
    sys.exit(main())
