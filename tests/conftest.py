from __future__ import annotations

import pytest

from icuforge.configuration import IcuforgeConfig, clear_settings_cache


PLURAL_WITH_OFFSET = (
    "{count, plural, offset:1 =0 {No items} one {One item} other {# items}}"
)
NESTED_SELECT = (
    "{gender, select, "
    "male {{count, plural, one {He has # item} other {He has # items}}} "
    "other {{count, plural, one {They have # item} other {They have # items}}}}"
)


@pytest.fixture
def plural_with_offset() -> str:
    return PLURAL_WITH_OFFSET


@pytest.fixture
def nested_select() -> str:
    return NESTED_SELECT


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep configuration independent of the developer's environment."""

    for key in IcuforgeConfig.model_fields:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    clear_settings_cache()
    yield tmp_path
    clear_settings_cache()
