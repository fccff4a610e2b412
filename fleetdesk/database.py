from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from sqlalchemy.pool import QueuePool
from fleetdesk.config import settings
import logging

logger = logging.getLogger(__name__)


# ─── Engine ────────────────────────────────────────────────────────────────────
def _engine_options() -> dict:
    if settings.is_sqlite:
        # Local/dev databases: no pool sizing, allow use across request threads
        return {"connect_args": {"check_same_thread": False}}
    return {
        "poolclass": QueuePool,
        "pool_size": settings.DATABASE_POOL_SIZE,
        "max_overflow": settings.DATABASE_MAX_OVERFLOW,
        "pool_timeout": settings.DATABASE_POOL_TIMEOUT,
        "pool_pre_ping": True,          # Hosted Postgres drops idle connections
    }


engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DATABASE_ECHO,
    **_engine_options(),
)


# ─── Session Factory ───────────────────────────────────────────────────────────
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,      # Avoid DetachedInstanceError after commit
)


# ─── Base Model ────────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.
    All models in fleetdesk/models/ should inherit from this class.
    """
    pass


# ─── Dependency Injection ──────────────────────────────────────────────────────
def get_db():
    """
    FastAPI dependency that provides a database session per request.
    Automatically closes session after request completes.

    Usage:
        @router.get("/trucks")
        def list_trucks(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


# ─── Health Check ──────────────────────────────────────────────────────────────
def check_db_connection() -> bool:
    """Verify database is reachable. Used at startup."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False
