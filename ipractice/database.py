from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from ipractice.core import config


def _connect_args(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    config.DATABASE_URL,
    echo=config.SQL_ECHO,
    connect_args=_connect_args(config.DATABASE_URL),
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_schema_checked: set[str] = set()

# Columns added after the first release, per table.
SCHEMA_UPGRADES = {
    'psychologists': [
        ('version', 'ALTER TABLE psychologists ADD COLUMN version INTEGER NOT NULL DEFAULT 1'),
        ('updated_at', 'ALTER TABLE psychologists ADD COLUMN updated_at TIMESTAMP'),
    ],
    'clients': [
        ('version', 'ALTER TABLE clients ADD COLUMN version INTEGER NOT NULL DEFAULT 1'),
        ('updated_at', 'ALTER TABLE clients ADD COLUMN updated_at TIMESTAMP'),
    ],
    'client_appointments': [
        ('comment', 'ALTER TABLE client_appointments ADD COLUMN comment VARCHAR'),
    ],
}


def ensure_schema(bind: Engine | None = None) -> None:
    bind = bind if bind is not None else engine
    cache_key = str(bind.url)

    if cache_key in _schema_checked:
        return

    with _schema_lock:
        if cache_key in _schema_checked:
            return

        inspector = inspect(bind)
        table_names = set(inspector.get_table_names())

        with bind.begin() as connection:
            for table_name, migration_steps in SCHEMA_UPGRADES.items():
                if table_name not in table_names:
                    continue

                existing_columns = {column['name'] for column in inspector.get_columns(table_name)}
                for column_name, statement in migration_steps:
                    if column_name not in existing_columns:
                        connection.execute(text(statement))

            if 'available_time_slots' in table_names:
                connection.execute(
                    text('CREATE INDEX IF NOT EXISTS idx_available_slots_start ON available_time_slots(psychologist_id, start_time)')
                )
            if 'client_appointments' in table_names:
                connection.execute(
                    text('CREATE INDEX IF NOT EXISTS idx_client_appointments_start ON client_appointments(client_id, start_time)')
                )

        _schema_checked.add(cache_key)
