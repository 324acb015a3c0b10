from app.extensions import db, bcrypt
from app.models import User

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "Password123!"


def seed():
    """Upsert the demo user and return it."""
    print("🌱 Seeding demo user...")

    password_hash = bcrypt.generate_password_hash(DEMO_PASSWORD).decode("utf-8")

    user = User.query.filter_by(email=DEMO_EMAIL).first()
    if user:
        user.password_hash = password_hash
    else:
        user = User(email=DEMO_EMAIL, password_hash=password_hash)
        db.session.add(user)

    db.session.commit()
    print(f"✅ Demo user ready: {DEMO_EMAIL}")
    return user
