"""
Tests for the vitality state configuration table.
"""

import pytest

from nexus_pulse.states import (
    STATE_CONFIGS,
    MascotAnimation,
    StateConfig,
    VitalityState,
    get_state_config,
)


def test_every_state_has_a_config():
    assert set(STATE_CONFIGS) == set(VitalityState)
    for config in STATE_CONFIGS.values():
        assert isinstance(config, StateConfig)


def test_particle_counts_increase_with_vitality():
    counts = [STATE_CONFIGS[state].particle_count for state in VitalityState]
    assert counts == [0, 4, 8, 16, 32]


def test_animations_follow_state_order():
    animations = [STATE_CONFIGS[state].mascot_animation for state in VitalityState]
    assert animations == [
        MascotAnimation.IDLE,
        MascotAnimation.BREATHE,
        MascotAnimation.PULSE,
        MascotAnimation.ORBIT,
        MascotAnimation.SUPERNOVA,
    ]


def test_glow_colors_are_hex():
    for config in STATE_CONFIGS.values():
        assert config.glow_color.startswith("#")
        assert len(config.glow_color) == 7
        assert config.ring_color.startswith("conic-gradient(")


def test_table_is_read_only():
    with pytest.raises(TypeError):
        STATE_CONFIGS[VitalityState.DORMANT] = STATE_CONFIGS[VitalityState.STABLE]


def test_get_state_config_accepts_strings():
    assert get_state_config("stable") is STATE_CONFIGS[VitalityState.STABLE]
    assert get_state_config(VitalityState.SUPERNOVA).label == "Supernova"


def test_get_state_config_rejects_unknown_state():
    with pytest.raises(ValueError):
        get_state_config("zombie")
