"""Unit tests for settings validation."""

import pytest
from pydantic import ValidationError

from certengine.config import Settings
from certengine.database import get_engine_url_and_connect_args


def test_database_url_gets_asyncpg_scheme():
    s = Settings(database_url="postgresql://u:p@db:5432/app")
    assert s.database_url == "postgresql+asyncpg://u:p@db:5432/app"


def test_threshold_must_be_on_rating_scale():
    with pytest.raises(ValidationError):
        Settings(certification_threshold=3.5)
    assert Settings(certification_threshold=2.75).certification_threshold == 2.75


def test_rating_window_positive():
    with pytest.raises(ValidationError):
        Settings(rating_window=0)


def test_sslmode_moved_out_of_url():
    url, connect_args = get_engine_url_and_connect_args(
        "postgresql+asyncpg://u:p@db.pooler.supabase.com:6543/postgres?sslmode=require"
    )
    assert "sslmode" not in url
    assert "ssl" in connect_args
