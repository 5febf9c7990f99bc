"""Engine and migration options per database dialect."""
import pytest
from sqlalchemy.pool import NullPool, StaticPool

from ebook_builder.database import _engine_options, migration_options


@pytest.mark.parametrize(
    "url, poolclass, batch",
    [
        ("sqlite+aiosqlite://", StaticPool, True),
        ("sqlite+aiosqlite:///:memory:", StaticPool, True),
        ("sqlite+aiosqlite:///./ebooks.db", NullPool, True),
        ("mysql+asyncmy://root:@localhost:3306/ebook_builder?charset=utf8mb4", NullPool, False),
    ],
)
def test_migration_options(url, poolclass, batch):
    assert migration_options(url) == {"poolclass": poolclass, "render_as_batch": batch}


def test_engine_options_per_dialect():
    assert _engine_options("sqlite+aiosqlite://")["poolclass"] is StaticPool
    mysql = _engine_options("mysql+asyncmy://root:@localhost/ebook_builder")
    assert mysql["pool_pre_ping"] is True
    assert "poolclass" not in mysql
