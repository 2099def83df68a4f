from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from loandesk.config.settings import settings


def configure_sqlite_locking(engine):
    """Make every SQLite transaction take the database write lock up front.

    pysqlite only opens a transaction before DML, so a cycle check read and
    the insert that follows it would otherwise run without a lock held in
    between. With BEGIN IMMEDIATE other connections wait (up to the driver
    timeout) until the transaction commits or rolls back.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        # SQLAlchemy emits BEGIN itself in the "begin" hook below
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


engine = create_engine(
    settings.DATABASE_URL,
    connect_args=settings.engine_connect_args(),
    pool_pre_ping=True,
)
if settings.is_sqlite():
    configure_sqlite_locking(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


# Required wherever a DB session is needed (FastAPI dependency)
def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()
