"""
Demo data seeder for the HSE dashboard.

Creates the demo accounts, two personnel members and the starting pharmacy
stock so every tab has something to show right after a fresh start. The
store is in memory, so this runs on every startup.

Credentials (printed to stdout on first run):
  Admin            : admin          / 12345
  Physician        : dr_ahmadi      / password  (occupational medicine + treatment)
  Safety officer   : safety_officer / password
  Fire chief       : fire_chief     / password
  Environment      : env_spec       / password

This seeder is idempotent; it is safe to call on every startup.
"""
from .models.base import SessionLocal, Base, engine, generate_uuid
from .models.personnel import Personnel
from .models.treatment import Medicine
from .models.user import User, UserRole

DEMO_ADMIN_USERNAME = "admin"
DEMO_ADMIN_PASSWORD = "12345"
DEMO_USER_PASSWORD = "password"

DEMO_USERS = [
    (DEMO_ADMIN_USERNAME, DEMO_ADMIN_PASSWORD, [UserRole.ADMIN]),
    ("dr_ahmadi", DEMO_USER_PASSWORD, [UserRole.OCCUPATIONAL_MEDICINE, UserRole.TREATMENT]),
    ("safety_officer", DEMO_USER_PASSWORD, [UserRole.SAFETY]),
    ("fire_chief", DEMO_USER_PASSWORD, [UserRole.FIRE_DEPARTMENT]),
    ("env_spec", DEMO_USER_PASSWORD, [UserRole.ENVIRONMENT]),
]

DEMO_PERSONNEL = [
    {
        "first_name": "Ali", "last_name": "Rezaei", "national_id": "1234567890",
        "personnel_id": "1001", "hire_date": "1398/02/15", "position": "Operator",
    },
    {
        "first_name": "Sara", "last_name": "Mohammadi", "national_id": "0987654321",
        "personnel_id": "1002", "hire_date": "1400/11/01", "position": "Technician",
    },
]

DEMO_MEDICINES = [
    {"name": "Acetaminophen", "type": "tablet", "stock": 150},
    {"name": "Ibuprofen", "type": "tablet", "stock": 80},
    {"name": "Diphenhydramine", "type": "syrup", "stock": 45},
]


def seed_demo_data() -> None:
    """Create demo users, personnel and medicines if they do not already exist."""
    # Ensure tables exist (no-op when already created by main.py)
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        _seed_users(db)
        _seed_personnel(db)
        _seed_medicines(db)
    finally:
        db.close()


# ── helpers ──────────────────────────────────────────────────────────────────

def _seed_users(db) -> None:
    for username, password, roles in DEMO_USERS:
        if db.query(User).filter(User.username == username).first():
            continue
        db.add(User(id=generate_uuid(), username=username, password=password, roles=roles))
        db.commit()
        print(f"[seed] Created demo user    : {username} / {password} {roles}")


def _seed_personnel(db) -> None:
    for data in DEMO_PERSONNEL:
        if db.query(Personnel).filter(Personnel.personnel_id == data["personnel_id"]).first():
            continue
        db.add(Personnel(id=generate_uuid(), **data))
        db.commit()
        print(f"[seed] Created demo personnel: {data['first_name']} {data['last_name']} ({data['personnel_id']})")


def _seed_medicines(db) -> None:
    for data in DEMO_MEDICINES:
        if db.query(Medicine).filter(Medicine.name == data["name"]).first():
            continue
        db.add(Medicine(id=generate_uuid(), **data))
        db.commit()
        print(f"[seed] Created demo medicine : {data['name']} (stock {data['stock']})")
