"""Pytest configuration and fixtures for pymppt tests."""

from __future__ import annotations

import pytest

from pymppt.registers import CONFIG_BASE_ADDRESS, CONFIG_REGISTER_COUNT, STATUS_REGISTER_COUNT
from pymppt.scaling import ScaleContext

# TriStar MPPT 60 style scale factors: V_PU = 180.0, I_PU = 80.0
TRISTAR_SCALE_REGISTERS = [180, 0, 80, 0]


def make_status_block(head: list[int] | None = None) -> list[int]:
    """Build a status block whose cells hold their own offset.

    The first cells are replaced by ``head`` (scale registers by default).
    """
    block = list(range(STATUS_REGISTER_COUNT))
    head = TRISTAR_SCALE_REGISTERS if head is None else head
    block[: len(head)] = head
    return block


def make_config_block(values: dict[int, int] | None = None) -> list[int]:
    """Build a zeroed configuration block with selected offsets set."""
    block = [0] * CONFIG_REGISTER_COUNT
    for offset, value in (values or {}).items():
        block[offset] = value
    return block


def config_bank(values: dict[int, int]) -> dict[int, int]:
    """Translate block offsets into absolute addresses for FakeTransport."""
    return {CONFIG_BASE_ADDRESS + offset: value for offset, value in values.items()}


@pytest.fixture
def unity_context() -> ScaleContext:
    """Scale context with V_PU = I_PU = 1.0."""
    return ScaleContext(1.0, 1.0)


@pytest.fixture
def tristar_context() -> ScaleContext:
    """Realistic scale context (V_PU = 180, I_PU = 80)."""
    return ScaleContext(180.0, 80.0)
