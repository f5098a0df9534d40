from __future__ import annotations

import os
import tempfile
from collections.abc import Iterator
from pathlib import Path

_TMP = Path(tempfile.mkdtemp(prefix="admissions-tests-"))

os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP / 'test.db'}"
os.environ["LOG_FILE"] = str(_TMP / "test.log")
os.environ["ENABLE_RATE_LIMIT"] = "0"
os.environ.setdefault("JWT_SECRET", "test-secret-key-with-enough-length-for-hs256")
os.environ["SMTP_HOST"] = ""

import pytest  # noqa: E402

from admissions.infrastructure.db import ENGINE, Base  # noqa: E402
from admissions.infrastructure.db import models  # noqa: E402,F401


@pytest.fixture()
def database() -> Iterator[None]:
    Base.metadata.drop_all(bind=ENGINE)
    Base.metadata.create_all(bind=ENGINE)
    yield
    Base.metadata.drop_all(bind=ENGINE)
