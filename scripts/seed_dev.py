# seed_dev.py
from sqlalchemy.orm import Session

from app.db.base import Base
from app.db.session import SessionLocal, engine
from app.models.form import Form
from app.models.user import User
from app.services import fields as field_service
from app.services import forms as form_service


USERS = [
    ("admin@example.com", "Admin User"),
    ("test@example.com", "Test User"),
    ("demo@example.com", "Demo User"),
]

FORMS = [
    {
        "name": {"en": "Customer Feedback Survey", "de": "Kundenumfrage"},
        "description": {"en": "Collect feedback from customers to improve our services"},
        "configuration": {"locales": ["en", "de"]},
        "fields": [
            {"type": "text", "name": "full_name", "label": {"en": "Full Name", "de": "Vollständiger Name"},
             "required": True, "placeholder": {"en": "Enter your full name"}},
            {"type": "email", "name": "email", "label": {"en": "Email Address", "de": "E-Mail-Adresse"},
             "required": True},
            {"type": "select", "name": "satisfaction", "label": {"en": "How satisfied are you?", "de": "Wie zufrieden sind Sie?"},
             "required": True,
             "options": [
                 {"value": "very_satisfied", "label": {"en": "Very satisfied", "de": "Sehr zufrieden"}},
                 {"value": "neutral", "label": {"en": "Neutral", "de": "Neutral"}},
                 {"value": "dissatisfied", "label": {"en": "Dissatisfied", "de": "Unzufrieden"}},
             ]},
            {"type": "textarea", "name": "feedback", "label": {"en": "Your feedback", "de": "Ihr Feedback"},
             "maxlength": 2000},
            {"type": "number", "name": "rating", "label": {"en": "Rating (1-10)", "de": "Bewertung (1-10)"},
             "required": True, "min": 1, "max": 10, "step": 1},
        ],
    },
    {
        "name": {"en": "Job Application"},
        "description": {"en": "Job application form for potential candidates"},
        "configuration": {"locales": ["en"]},
        "fields": [
            {"type": "text", "name": "first_name", "label": {"en": "First Name"}, "required": True},
            {"type": "text", "name": "last_name", "label": {"en": "Last Name"}, "required": True},
            {"type": "tel", "name": "phone", "label": {"en": "Phone Number"}},
            {"type": "file", "name": "resume", "label": {"en": "Upload Resume"}, "required": True,
             "accept": ".pdf,application/msword"},
            {"type": "date", "name": "start_date", "label": {"en": "Earliest start date"},
             "min": "2025-01-01", "max": "2026-12-31"},
        ],
    },
]


def get_or_create_user(db: Session, email: str, full_name: str) -> User:
    u = db.query(User).filter(User.email == email).one_or_none()
    if u:
        if not u.is_active:
            u.is_active = True
            db.commit()
        return u

    u = User(email=email, full_name=full_name, is_active=True)
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


def seed_forms(db: Session, user: User) -> list[Form]:
    existing = {f.name.get("en") for f in form_service.list_forms(db, user)}
    created = []
    for seed in FORMS:
        if seed["name"]["en"] in existing:
            continue
        form = form_service.create_form(db, user, {
            "name": seed["name"],
            "description": seed["description"],
            "configuration": seed["configuration"],
        })
        for configuration in seed["fields"]:
            field_service.create_field(db, user, form.id, {"configuration": dict(configuration)})
        db.commit()
        created.append(form)
    return created


def main():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        for email, full_name in USERS:
            user = get_or_create_user(db, email, full_name)
            created = seed_forms(db, user)
            print(f"{email}: {len(created)} form(s) created")

        print("\n=== DEV SEED COMPLETE ===")
        print("Try: curl -H 'X-User-Email: demo@example.com' http://localhost:8000/forms")
    finally:
        db.close()


if __name__ == "__main__":
    main()
