#!/usr/bin/env python3
"""
Seed Demo Contacts

Loads the five sample contacts used by the UI mock-ups into the contact
book of one user, so a fresh install has something to search, filter and
sort.

Reads the database URL the same way the service does (DATABASE_URL, else
DB_* variables).

Usage:
  python scripts/seed_demo_contacts.py --owner you@example.com [--reset] [--json]
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass, asdict
from typing import List, Optional

from sqlalchemy.orm import Session

from contactbook.db import models
from contactbook.db.repositories import contacts as contact_repo
from contactbook.utils.validation import clean_contact_fields

logger = logging.getLogger("contactbook.seed")

DEMO_CONTACTS = [
    {"name": "Ana García", "phone": "5512345678", "email": "ana.garcia@example.com", "birthday": "1990-03-15"},
    {"name": "Luis Pérez", "phone": "5587654321", "email": "luis.perez@example.com", "birthday": "1985-11-20"},
    {"name": "Carlos Ruiz", "phone": "5555555555", "email": "carlos.ruiz@example.com", "birthday": "1992-07-01"},
    {"name": "María López", "phone": "5599999999", "email": "maria.lopez@example.com", "birthday": "1990-03-15"},
    {"name": "Javier Domínguez", "phone": None, "email": "javier.d@example.com", "birthday": "2000-01-25"},
]


@dataclass
class SeedReport:
    owner_email: str
    removed: int
    created: List[int]

    def to_json(self) -> str:
        return json.dumps(asdict(self), indent=2)

    def pretty(self) -> str:
        lines = [f"Seeded contacts for {self.owner_email}"]
        if self.removed:
            lines.append(f"- removed {self.removed} existing contact(s)")
        lines.append(f"- created {len(self.created)} contact(s): ids {', '.join(str(i) for i in self.created)}")
        return "\n".join(lines)


def seed(db: Session, owner_email: str, reset: bool = False) -> SeedReport:
    owner_email = owner_email.strip().lower()
    removed = contact_repo.delete_all_contacts(db, owner_email) if reset else 0
    created = []
    for raw in DEMO_CONTACTS:
        fields, errors = clean_contact_fields(**raw)
        if errors:
            raise ValueError(f"Invalid demo contact {raw['name']}: {errors}")
        created.append(contact_repo.create_contact(db, owner_email, fields).id)
    return SeedReport(owner_email=owner_email, removed=removed, created=created)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Load demo contacts for a user")
    parser.add_argument("--owner", required=True, help="Email of the user who will own the contacts")
    parser.add_argument("--reset", action="store_true", help="Delete the user's existing contacts first")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)

    from contactbook.db.database import SessionLocal, engine

    if str(engine.url).startswith("sqlite"):
        models.Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        report = seed(db, args.owner, reset=args.reset)
    finally:
        db.close()

    logger.info("seeded %d contacts for %s", len(report.created), report.owner_email)
    print(report.to_json() if args.json else report.pretty())
    return 0


if __name__ == "__main__":
    sys.exit(main())
