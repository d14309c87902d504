"""Unit tests for settings bounds."""

import pytest
from pydantic import ValidationError

from tenantauthz.config import Settings


def test_page_limits_default() -> None:
    settings = Settings()
    assert settings.default_page_limit == 50
    assert settings.max_page_limit == 100


@pytest.mark.parametrize("value", [0, 101, 500])
def test_max_page_limit_capped_at_100(value: int) -> None:
    with pytest.raises(ValidationError, match="max_page_limit"):
        Settings(max_page_limit=value)


def test_max_page_limit_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAX_PAGE_LIMIT", "1000")
    with pytest.raises(ValidationError):
        Settings()
