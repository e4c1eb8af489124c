"""Market creation, staking, settlement and reporting against a real store."""

from src.container import Services
from src.wl_common.enums import ErrorKind, MarketStatus
from src.wl_ledger.infrastructure.persistence import LedgerRepository
from src.wl_market.infrastructure.persistence import MarketRepository
from src.wl_settlement.application.service import SettlementService


async def _balance(services: Services, user_id: str) -> int:
    return (await services.ledger.get_balance(user_id)).unwrap()


async def _coin_flip(services: Services) -> int:
    result = await services.markets.create_market("C", "Coin flip", ["Heads", "Tails"], "Heads", 20)
    market_id = result.unwrap()
    (await services.markets.place_stake(market_id, "U", "Tails", 30)).unwrap()
    return market_id


class TestCreateMarket:
    async def test_debits_creator(self, services: Services) -> None:
        market_id = await _coin_flip(services)

        assert await _balance(services, "C") == 80
        assert await _balance(services, "U") == 70
        market = (await services.markets.get_market(market_id)).value
        assert market.status == MarketStatus.OPEN
        assert market.options == ["Heads", "Tails"]
        assert market.pot == 50
        assert [(s.user_id, s.option, s.amount) for s in market.stakes] == [
            ("C", "Heads", 20),
            ("U", "Tails", 30),
        ]

    async def test_unaffordable_opening_stake_creates_nothing(self, services: Services) -> None:
        result = await services.markets.create_market("C", "Q", ["A", "B"], "A", 101)

        assert result.kind is ErrorKind.INSUFFICIENT_FUNDS
        assert (await services.markets.list_open_markets()).value == []
        assert await _balance(services, "C") == 100

    async def test_stake_normalized_to_market_option(self, services: Services) -> None:
        market_id = await _coin_flip(services)

        stake = (await services.markets.place_stake(market_id, "V", " heads ", 5)).value

        assert stake.option == "Heads"


class TestStakeRules:
    async def test_unknown_market(self, services: Services) -> None:
        result = await services.markets.place_stake(404, "U", "Heads", 5)
        assert result.kind is ErrorKind.MARKET_NOT_FOUND

    async def test_invalid_option_leaves_balance(self, services: Services) -> None:
        market_id = await _coin_flip(services)

        result = await services.markets.place_stake(market_id, "V", "Edge", 5)

        assert result.kind is ErrorKind.INVALID_OPTION
        assert await _balance(services, "V") == 100

    async def test_overdraft_stake_refused(self, services: Services) -> None:
        market_id = await _coin_flip(services)

        result = await services.markets.place_stake(market_id, "U", "Heads", 71)

        assert result.kind is ErrorKind.INSUFFICIENT_FUNDS
        assert await _balance(services, "U") == 70
        assert (await services.markets.get_market(market_id)).value.pot == 50


class TestResolve:
    async def test_coin_flip_end_to_end(self, services: Services) -> None:
        market_id = await _coin_flip(services)

        result = await services.settlement.resolve_market(market_id, "Heads", is_admin=True)

        settled = result.unwrap()
        assert settled.total_pot == 50
        assert [(p.user_id, p.winnings, p.profit) for p in settled.winners] == [("C", 50, 30)]
        assert await _balance(services, "C") == 130
        assert await _balance(services, "U") == 70
        market = (await services.markets.get_market(market_id)).value
        assert market.status == MarketStatus.RESOLVED
        assert market.outcome == "Heads"

    async def test_settles_exactly_once(self, services: Services) -> None:
        market_id = await _coin_flip(services)
        await services.settlement.resolve_market(market_id, "Heads", is_admin=True)

        again = await services.settlement.resolve_market(market_id, "Tails", is_admin=True)
        void = await services.settlement.void_market(market_id, is_admin=True)

        assert again.kind is ErrorKind.ALREADY_SETTLED
        assert void.kind is ErrorKind.ALREADY_SETTLED
        assert await _balance(services, "C") == 130

    async def test_stake_after_settlement_closed(self, services: Services) -> None:
        market_id = await _coin_flip(services)
        await services.settlement.resolve_market(market_id, "Heads", is_admin=True)

        result = await services.markets.place_stake(market_id, "U", "Heads", 5)

        assert result.kind is ErrorKind.MARKET_CLOSED
        assert await _balance(services, "U") == 70

    async def test_no_matching_outcome_refunds(self, services: Services) -> None:
        market_id = await _coin_flip(services)

        settled = (await services.settlement.resolve_market(market_id, "Edge", is_admin=True)).value

        assert settled.winners == []
        assert sum(r.amount for r in settled.refunds) == 50
        assert await _balance(services, "C") == 100
        assert await _balance(services, "U") == 100

    async def test_non_admin_leaves_market_open(self, services: Services) -> None:
        market_id = await _coin_flip(services)

        result = await services.settlement.resolve_market(market_id, "Heads", is_admin=False)

        assert result.kind is ErrorKind.PERMISSION_DENIED
        assert (await services.markets.get_market(market_id)).value.is_open


class TestVoid:
    async def test_refunds_and_closes(self, services: Services) -> None:
        market_id = await _coin_flip(services)

        settled = (await services.settlement.void_market(market_id, is_admin=True)).unwrap()

        assert settled.status is MarketStatus.VOIDED
        assert await _balance(services, "C") == 100
        assert await _balance(services, "U") == 100
        result = await services.markets.place_stake(market_id, "U", "Tails", 1)
        assert result.kind is ErrorKind.MARKET_CLOSED


class _FailingLedger(LedgerRepository):
    """Ledger whose credit to one user hits a dropped connection."""

    def __init__(self, starting_balance: int, fail_user: str) -> None:
        super().__init__(starting_balance)
        self.fail_user = fail_user

    async def adjust(self, db, user_id, delta):  # type: ignore[no-untyped-def]
        if user_id == self.fail_user and delta > 0:
            raise ConnectionResetError("connection lost mid-settlement")
        return await super().adjust(db, user_id, delta)


class TestAtomicity:
    async def test_failed_credit_rolls_back_settlement(self, services: Services, database) -> None:
        market_id = (
            await services.markets.create_market("A", "Q", ["X", "Y"], "X", 10)
        ).unwrap()
        (await services.markets.place_stake(market_id, "B", "X", 10)).unwrap()
        flaky = SettlementService(database, MarketRepository(), _FailingLedger(100, "B"))

        result = await flaky.resolve_market(market_id, "X", is_admin=True)

        assert result.kind is ErrorKind.STORE_UNAVAILABLE
        # A is credited before B; that credit must be gone too
        assert await _balance(services, "A") == 90
        assert await _balance(services, "B") == 90
        assert (await services.markets.get_market(market_id)).value.is_open
        retry = await services.settlement.resolve_market(market_id, "X", is_admin=True)
        assert retry.ok
        assert await _balance(services, "A") == 100


class TestConservation:
    async def test_balances_plus_open_pots_equal_granted(self, services: Services) -> None:
        first = await _coin_flip(services)
        second = (
            await services.markets.create_market("A", "Rain?", ["Yes", "No"], "Yes", 10)
        ).unwrap()
        (await services.markets.place_stake(second, "B", "No", 15)).unwrap()
        (await services.markets.place_stake(second, "A", "No", 5)).unwrap()
        third = (
            await services.markets.create_market("B", "Who?", ["P", "Q"], "P", 7)
        ).unwrap()

        for step in (
            services.settlement.resolve_market(first, "Tails", is_admin=True),
            services.settlement.void_market(third, is_admin=True),
        ):
            (await step).unwrap()

        stats = (await services.reporting.get_stats()).value
        assert stats.user_count == 4
        assert stats.open_pot == 30
        assert stats.markets_by_status == {"OPEN": 1, "RESOLVED": 1, "VOIDED": 1}
        assert stats.conservation_gap == 0

    async def test_rounding_remainder_shows_as_gap(self, services: Services) -> None:
        market_id = (
            await services.markets.create_market("A", "Q", ["X", "Y"], "X", 1)
        ).unwrap()
        (await services.markets.place_stake(market_id, "B", "X", 1)).unwrap()
        (await services.markets.place_stake(market_id, "C", "Y", 1)).unwrap()

        settled = (await services.settlement.resolve_market(market_id, "X", is_admin=True)).value

        assert settled.undistributed == 1
        stats = (await services.reporting.get_stats()).value
        assert stats.conservation_gap == -1


class TestReadProjections:
    async def test_get_market_is_idempotent(self, services: Services) -> None:
        market_id = await _coin_flip(services)

        first = (await services.markets.get_market(market_id)).value
        second = (await services.markets.get_market(market_id)).value

        assert first == second

    async def test_unknown_market_is_none(self, services: Services) -> None:
        assert (await services.markets.get_market(999)).value is None

    async def test_open_markets_and_user_stakes(self, services: Services) -> None:
        open_id = await _coin_flip(services)
        closed_id = (
            await services.markets.create_market("U", "Closed", ["A", "B"], "A", 5)
        ).unwrap()
        (await services.settlement.void_market(closed_id, is_admin=True)).unwrap()

        markets = (await services.markets.list_open_markets()).value
        mine = (await services.markets.list_user_open_stakes("U")).value

        assert [m.id for m in markets] == [open_id]
        assert [(s.market_id, s.question, s.stake.amount) for s in mine] == [
            (open_id, "Coin flip", 30)
        ]

    async def test_list_market_stakes(self, services: Services) -> None:
        market_id = await _coin_flip(services)

        stakes = (await services.reporting.list_market_stakes(market_id)).value
        missing = await services.reporting.list_market_stakes(999)

        assert [s.user_id for s in stakes] == ["C", "U"]
        assert missing.kind is ErrorKind.MARKET_NOT_FOUND


class TestReset:
    async def test_reset_empties_everything(self, services: Services) -> None:
        await _coin_flip(services)

        (await services.admin.reset_all(is_admin=True)).unwrap()

        stats = (await services.reporting.get_stats()).value
        assert (stats.user_count, stats.market_count, stats.stake_count) == (0, 0, 0)
        assert await _balance(services, "C") == 100

    async def test_reset_restarts_ids(self, services: Services) -> None:
        await _coin_flip(services)
        await _coin_flip(services)

        (await services.admin.reset_all(is_admin=True)).unwrap()
        market_id = (
            await services.markets.create_market("C", "Again", ["A", "B"], "A", 1)
        ).unwrap()

        assert market_id == 1
        stakes = (await services.reporting.list_market_stakes(market_id)).value
        assert [s.id for s in stakes] == [1]

    async def test_reset_requires_admin(self, services: Services) -> None:
        await _coin_flip(services)

        result = await services.admin.reset_all(is_admin=False)

        assert result.kind is ErrorKind.PERMISSION_DENIED
        assert len((await services.markets.list_open_markets()).value) == 1
