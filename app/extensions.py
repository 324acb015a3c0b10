from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager
from flask_bcrypt import Bcrypt
from flask_cors import CORS
from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

# named constraints so Flask-Migrate can alter them (sqlite batch mode included)
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


cors = CORS()

db = SQLAlchemy(model_class=Base)
migrate = Migrate(render_as_batch=True)

# signs and reads the session cookie
jwt = JWTManager()

bcrypt = Bcrypt()
