"""Tests for MpptSession against the in-memory transport."""

from __future__ import annotations

import pytest
from conftest import config_bank

from pymppt.exceptions import EncodingOverflowError, MpptError, UnknownFieldError
from pymppt.scaling import ScaleContext
from pymppt.session import MpptSession
from pymppt.transports import FakeTransport
from pymppt.transports.exceptions import TransportConnectionError

TRISTAR_BANK = {0: 180, 1: 0, 2: 80, 3: 0, **config_bank({0x00: 2621, 0x01: 2475})}


async def _refreshed_session() -> MpptSession:
    transport = FakeTransport(TRISTAR_BANK)
    await transport.connect()
    session = MpptSession(transport)
    await session.refresh()
    return session


class TestRefresh:
    """Tests for MpptSession.refresh()."""

    @pytest.mark.asyncio
    async def test_derives_context(self) -> None:
        """The context comes from the first four status registers."""
        async with FakeTransport(TRISTAR_BANK) as transport:
            session = MpptSession(transport)
            await session.refresh()

            assert session.context == ScaleContext(180.0, 80.0)
            assert session.config.context is session.status.context

    @pytest.mark.asyncio
    async def test_records_populated(self) -> None:
        async with FakeTransport(TRISTAR_BANK) as transport:
            session = MpptSession(transport)
            await session.refresh()

            assert len(session.status) == 62
            assert len(session.config) == 27
            assert session.config["ev_absorp"].raw == 2621

    @pytest.mark.asyncio
    async def test_unrefreshed_session(self) -> None:
        """Test state access before refresh raises MpptError."""
        session = MpptSession(FakeTransport())

        with pytest.raises(MpptError, match="not been refreshed"):
            _ = session.config
        with pytest.raises(MpptError):
            session.get("ev_float")

    @pytest.mark.asyncio
    async def test_disconnected_transport(self) -> None:
        session = MpptSession(FakeTransport())

        with pytest.raises(TransportConnectionError):
            await session.refresh()

    @pytest.mark.asyncio
    async def test_refresh_picks_up_new_scale(self) -> None:
        """A second refresh re-derives the context."""
        async with FakeTransport(TRISTAR_BANK) as transport:
            session = MpptSession(transport)
            await session.refresh()

            transport.registers[0] = 90
            await session.refresh()

            assert session.context.voltage_scale == 90.0
            assert session.get("ev_absorp").value == pytest.approx(7.1988, abs=1e-4)


class TestGet:
    @pytest.mark.asyncio
    async def test_get_scaled_value(self) -> None:
        session = await _refreshed_session()
        field = session.get("EV_ABSORP")

        assert field.name == "ev_absorp"
        assert field.raw == 2621
        assert field.value == pytest.approx(14.3976, abs=1e-4)

    @pytest.mark.asyncio
    async def test_get_unknown(self) -> None:
        session = await _refreshed_session()
        with pytest.raises(UnknownFieldError):
            session.get("nope")


class TestSet:
    """Tests for MpptSession.set()."""

    @pytest.mark.asyncio
    async def test_set_writes_register(self) -> None:
        """13.6 V at V_PU = 180 is raw 2475 written to 0xE001."""
        session = await _refreshed_session()
        transport = session.transport
        assert isinstance(transport, FakeTransport)
        transport.registers[0xE001] = 0

        request = await session.set("ev_float", 13.6)

        assert request.raw == 2475
        assert request.address == 0xE001
        assert transport.writes == [(0xE001, 2475)]
        assert session.config["ev_float"].raw == 2475

    @pytest.mark.asyncio
    async def test_set_keeps_previous(self) -> None:
        session = await _refreshed_session()
        request = await session.set("ev_absorp", 14.0)
        assert request.previous.raw == 2621
        assert request.raw == 2548

    @pytest.mark.asyncio
    async def test_dry_run_does_not_write(self) -> None:
        session = await _refreshed_session()
        transport = session.transport
        assert isinstance(transport, FakeTransport)

        request = await session.set("ev_absorp", 14.0, dry_run=True)

        assert request.raw == 2548
        assert transport.writes == []
        assert session.config["ev_absorp"].raw == 2621

    @pytest.mark.asyncio
    async def test_overflow_not_written(self) -> None:
        """A value that does not fit is rejected before any bus traffic."""
        session = await _refreshed_session()
        transport = session.transport
        assert isinstance(transport, FakeTransport)

        with pytest.raises(EncodingOverflowError):
            await session.set("ev_absorp", 400.0)
        assert transport.writes == []

    @pytest.mark.asyncio
    async def test_to_dict(self) -> None:
        session = await _refreshed_session()
        data = session.to_dict()

        assert data["context"] == {"voltage_scale": 180.0, "current_scale": 80.0}
        assert data["eeprom"]["ev_absorp"]["raw"] == 2621
        assert data["ram"]["v_pu_hi"]["raw"] == 180
