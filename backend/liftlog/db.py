from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from .settings import get_settings

settings = get_settings()
url = settings.SQLALCHEMY_URL

connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}

# Create the SQLAlchemy engine
engine = create_engine(url, pool_pre_ping=True, connect_args=connect_args)

if url.startswith("sqlite"):
    # sqlite ignores ON DELETE CASCADE unless asked
    @event.listens_for(engine, "connect")
    def _enable_sqlite_fks(dbapi_conn, _record):
        cur = dbapi_conn.cursor()
        cur.execute("PRAGMA foreign_keys=ON")
        cur.close()

# Define the base class that all models should inherit from
class Base(DeclarativeBase):
    pass

# Session factory
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

# Dependency for FastAPI routes
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
