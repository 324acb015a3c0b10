# app/services/auth.py
import logging

from flask_jwt_extended import create_access_token, get_jwt_identity, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from app.errors import ConflictError, UnauthorizedError, ValidationError
from app.extensions import bcrypt, db
from app.models import Profile, User
from app.services.parsing import check_length

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class AuthService:
    @staticmethod
    def issue_token(user):
        """Signed session token; expiry comes from JWT_ACCESS_TOKEN_EXPIRES (7 days)."""
        return create_access_token(
            identity=str(user.id),
            additional_claims={"email": user.email},
        )

    @staticmethod
    def register(name, email, password):
        """
        Create a user plus its profile.
        Return (user, token).
        """
        name = (name or "").strip() if isinstance(name, str) else ""
        email = (email or "").strip().lower() if isinstance(email, str) else ""
        password = password if isinstance(password, str) else ""

        if not name:
            raise ValidationError("Name is required")
        if not email:
            raise ValidationError("Email is required")
        if "@" not in email:
            raise ValidationError("Email is invalid")
        check_length(email, User.__table__.c.email, "Email")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password min {MIN_PASSWORD_LENGTH} characters")

        logger.info(f"📝 Register attempt: {email}")

        existing = User.query.filter_by(email=email).first()
        if existing:
            logger.info("❌ Email already registered")
            raise ConflictError("Email already registered")

        hashed_password = bcrypt.generate_password_hash(password).decode("utf-8")

        user = User(email=email, password_hash=hashed_password)
        user.profile = Profile(name=name[:80])

        db.session.add(user)
        db.session.commit()
        logger.info(f"✅ Registration successful for {email}")

        return user, AuthService.issue_token(user)

    @staticmethod
    def authenticate_user(email, password):
        """
        Check email & password using bcrypt.
        Return (user, token) if valid.
        """
        email = (email or "").strip().lower() if isinstance(email, str) else ""
        password = password if isinstance(password, str) else ""

        if not email:
            raise ValidationError("Email is required")
        if not password:
            raise ValidationError("Password is required")

        user = User.query.filter_by(email=email).first()

        # same message for both cases so the endpoint can't be used to probe emails
        if not user:
            logger.info(f"❌ Login failed, unknown email: {email}")
            raise UnauthorizedError("Invalid credentials")

        if not bcrypt.check_password_hash(user.password_hash, password):
            logger.info(f"❌ Login failed, bad password: {email}")
            raise UnauthorizedError("Invalid credentials")

        logger.info(f"✅ Auth successful for {email}")
        return user, AuthService.issue_token(user)

    @staticmethod
    def optional_user():
        """User behind the session cookie, or None when absent or invalid."""
        try:
            verify_jwt_in_request(optional=True)
        except (JWTExtendedException, PyJWTError) as e:
            logger.debug(f"Ignoring invalid session cookie: {e}")
            return None
        user_id = get_jwt_identity()
        if not user_id:
            return None
        return db.session.get(User, user_id)

