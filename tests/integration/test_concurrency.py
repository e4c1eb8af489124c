"""Concurrent access against PostgreSQL: row locks, exactly-once settlement.

Skipped unless TEST_DATABASE_URL points at a migrated PostgreSQL database.
"""

import asyncio

from src.container import Services
from src.wl_common.enums import ErrorKind


async def _open_market(services: Services) -> int:
    market_id = (
        await services.markets.create_market("C", "Coin flip", ["Heads", "Tails"], "Heads", 20)
    ).unwrap()
    (await services.markets.place_stake(market_id, "U", "Tails", 30)).unwrap()
    return market_id


class TestExactlyOnceSettlement:
    async def test_concurrent_resolves(self, services: Services) -> None:
        market_id = await _open_market(services)

        results = await asyncio.gather(
            *(services.settlement.resolve_market(market_id, "Heads", is_admin=True) for _ in range(8))
        )

        assert sum(r.ok for r in results) == 1
        assert all(r.kind is ErrorKind.ALREADY_SETTLED for r in results if not r.ok)
        assert (await services.ledger.get_balance("C")).value == 130

    async def test_mixed_resolve_and_void(self, services: Services) -> None:
        market_id = await _open_market(services)

        results = await asyncio.gather(
            services.settlement.resolve_market(market_id, "Tails", is_admin=True),
            services.settlement.void_market(market_id, is_admin=True),
            services.settlement.resolve_market(market_id, "Heads", is_admin=True),
            services.settlement.void_market(market_id, is_admin=True),
        )

        assert sum(r.ok for r in results) == 1
        stats = (await services.reporting.get_stats()).value
        assert stats.conservation_gap == 0


class TestNoOverdraft:
    async def test_concurrent_stakes_never_overdraw(self, services: Services) -> None:
        market_id = await _open_market(services)

        results = await asyncio.gather(
            *(services.markets.place_stake(market_id, "V", "Tails", 30) for _ in range(6))
        )

        assert sum(r.ok for r in results) == 3
        assert all(r.kind is ErrorKind.INSUFFICIENT_FUNDS for r in results if not r.ok)
        assert (await services.ledger.get_balance("V")).value == 10

    async def test_concurrent_first_touch_creates_one_row(self, services: Services) -> None:
        results = await asyncio.gather(
            *(services.ledger.get_balance("fresh") for _ in range(10))
        )

        assert {r.value for r in results} == {100}
        assert (await services.reporting.get_stats()).value.user_count == 1


class TestStakeVersusSettlement:
    async def test_every_accepted_stake_is_settled(self, services: Services) -> None:
        market_id = await _open_market(services)

        stakes = [services.markets.place_stake(market_id, f"s{i}", "Heads", 10) for i in range(5)]
        results = await asyncio.gather(
            *stakes, services.settlement.void_market(market_id, is_admin=True)
        )

        stake_results, void_result = results[:-1], results[-1]
        assert void_result.ok
        assert all(r.ok or r.kind is ErrorKind.MARKET_CLOSED for r in stake_results)
        # stakes that got in were refunded; stakes that lost the race never debited
        for i in range(5):
            assert (await services.ledger.get_balance(f"s{i}")).value == 100
        assert (await services.reporting.get_stats()).value.conservation_gap == 0


class TestOpaqueHandles:
    async def test_long_handle_round_trips(self, services: Services) -> None:
        handle = "discord:" + "9" * 200

        market_id = (
            await services.markets.create_market(handle, "Long?", ["Y", "N"], "Y", 10)
        ).unwrap()

        assert (await services.ledger.get_balance(handle)).value == 90
        assert (await services.markets.get_market(market_id)).value.creator_id == handle
