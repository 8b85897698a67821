"""Unit tests for claude_hooks.core.config_presets."""

from __future__ import annotations

import pytest

from claude_hooks.core.config_presets import (
    CONFIG_PRESETS,
    PRESET_NAMES,
    get_preset,
    is_preset_name,
)
from claude_hooks.core.config_validator import validate_config


@pytest.mark.unit
class TestPresets:
    """Test the named preset overlays."""

    def test_names(self) -> None:
        assert PRESET_NAMES == ("minimal", "security", "quality", "full")

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("full", True),
            ("security", True),
            ("./full.json", False),
            ("Full", False),
            (3, False),
            (None, False),
        ],
    )
    def test_is_preset_name(self, value: object, expected: bool) -> None:
        assert is_preset_name(value) is expected

    def test_get_preset_returns_copy(self) -> None:
        preset = get_preset("security")
        preset["guards"]["branch"]["enabled"] = False
        assert CONFIG_PRESETS["security"]["guards"]["branch"]["enabled"] is True

    def test_unknown_preset_raises(self) -> None:
        with pytest.raises(KeyError):
            get_preset("paranoid")

    @pytest.mark.parametrize("name", PRESET_NAMES)
    def test_presets_validate_cleanly(self, name: str) -> None:
        result = validate_config(get_preset(name))
        assert result.valid is True
        assert result.warnings == []

    def test_minimal_disables_secret_leak(self) -> None:
        assert get_preset("minimal")["guards"]["secretLeak"]["enabled"] is False

    def test_full_sets_rate_limits(self) -> None:
        limiter = get_preset("full")["rateLimiter"]
        assert limiter["maxToolCallsPerSession"] == 200
        assert limiter["maxFileEditsPerSession"] == 100
