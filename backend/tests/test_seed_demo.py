"""Tests for the demo data seeder."""
from hse.models.personnel import Personnel
from hse.models.treatment import Medicine
from hse.models.user import User, UserRole
from hse.seed_demo import DEMO_ADMIN_PASSWORD, DEMO_ADMIN_USERNAME, DEMO_USERS, seed_demo_data


class TestSeedDemoData:
    def test_creates_admin_user(self, db):
        seed_demo_data()
        admin = db.query(User).filter(User.username == DEMO_ADMIN_USERNAME).first()
        assert admin is not None
        assert admin.roles == [UserRole.ADMIN]
        assert admin.password == DEMO_ADMIN_PASSWORD

    def test_creates_every_demo_user(self, db):
        seed_demo_data()
        roles = {u.username: u.roles for u in db.query(User).all()}
        assert roles["dr_ahmadi"] == [UserRole.OCCUPATIONAL_MEDICINE, UserRole.TREATMENT]
        assert roles["env_spec"] == [UserRole.ENVIRONMENT]
        assert len(roles) == len(DEMO_USERS)

    def test_creates_personnel_and_medicines(self, db):
        seed_demo_data()
        assert db.query(Personnel).count() == 2
        stocks = sorted(m.stock for m in db.query(Medicine).all())
        assert stocks == [45, 80, 150]

    def test_idempotent_on_second_call(self, db):
        """Calling seed_demo_data twice must not create duplicate records."""
        seed_demo_data()
        seed_demo_data()
        assert db.query(User).filter(User.username == DEMO_ADMIN_USERNAME).count() == 1
        assert db.query(Personnel).count() == 2
        assert db.query(Medicine).count() == 3
