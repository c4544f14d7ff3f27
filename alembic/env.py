# alembic/env.py
import os
import sys
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from dotenv import load_dotenv
from sqlalchemy import engine_from_config, pool

# Run from the repo root: make "model" importable and pick up .env
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))
load_dotenv(PROJECT_ROOT / ".env")

from model.base import Base  # noqa: E402
from model import load_all_models  # noqa: E402

load_all_models()

config = context.config

# DB_URL from the environment wins over alembic.ini
db_url = os.getenv("DB_URL")
if db_url:
    config.set_main_option("sqlalchemy.url", db_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# Autogenerate must never drop anything from these
PROTECTED_TABLES = {
    'users', 'user_profiles', 'point_transactions', 'follows',
    'posts', 'comments', 'comment_replies', 'likes', 'media_uploads',
}

_DESTRUCTIVE_OPS = {
    'DropTableOp': lambda op: f"DROP TABLE {op.table_name}",
    'DropIndexOp': lambda op: f"DROP INDEX {op.index_name} ON {op.table_name}",
    'DropColumnOp': lambda op: f"DROP COLUMN {op.table_name}.{op.column_name}",
}


def _destructive(ops):
    """Describe every drop in `ops` that touches a protected table."""
    found = []
    for op in ops:
        if hasattr(op, 'ops'):
            # ModifyTableOps wraps column-level ops
            found.extend(_destructive(op.ops))
            continue
        describe = _DESTRUCTIVE_OPS.get(type(op).__name__)
        if describe and getattr(op, 'table_name', None) in PROTECTED_TABLES:
            found.append(describe(op))
    return found


def process_revision_directives(context, revision, directives):
    """Refuse to write an autogenerated revision that drops protected schema."""
    if not (config.cmd_opts and config.cmd_opts.autogenerate):
        return

    blocked = _destructive(directives[0].upgrade_ops.ops)
    if blocked:
        print("\nAutogenerate blocked, the revision would run:")
        for line in blocked:
            print(f"  - {line}")
        print("Write this migration by hand (alembic revision -m '...') and review it.\n")
        directives[:] = []


def _configure(**kwargs):
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        process_revision_directives=process_revision_directives,
        **kwargs,
    )


def run_migrations_offline() -> None:
    _configure(url=config.get_main_option("sqlalchemy.url"), literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        # SQLite can't ALTER most things in place
        _configure(connection=connection, render_as_batch=connection.dialect.name == "sqlite")
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
