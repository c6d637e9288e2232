"""BetBook: stores bets per round and aggregates exposure per side.

Placement runs inside the round clock's betting window, so the stake
snapshot taken when betting closes sees every accepted bet and none
after it. The ledger debit and the bet row share one transaction.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.pg_account.domain.repository import LedgerProtocol
from src.pg_account.infrastructure.persistence import LedgerRepository
from src.pg_betting.domain.models import Bet, StakeSnapshot
from src.pg_betting.domain.repository import BetRepositoryProtocol, BettingGateProtocol
from src.pg_betting.infrastructure.persistence import BetRepository
from src.pg_broadcast.application.hub import Broadcaster
from src.pg_broadcast.domain.events import BetPlaced
from src.pg_common.enums import BetSide, BetStatus, LedgerEntryType
from src.pg_common.errors import InternalError, InvalidBetError, UserNotFoundError
from src.pg_common.id_generator import generate_id
from src.pg_gateway.user.repository import UserLookupProtocol, UserRepository

logger = logging.getLogger(__name__)


def parse_side(raw: str | BetSide) -> BetSide:
    """Accept UP/DOWN in any case, plus the green/red color aliases."""
    if isinstance(raw, BetSide):
        return raw
    value = raw.strip().upper()
    aliases = {"GREEN": BetSide.UP, "RED": BetSide.DOWN}
    if value in aliases:
        return aliases[value]
    try:
        return BetSide(value)
    except ValueError:
        raise InvalidBetError(f"unknown side {raw!r}") from None


class BetBook:
    def __init__(
        self,
        repo: BetRepositoryProtocol | None = None,
        ledger: LedgerProtocol | None = None,
        users: UserLookupProtocol | None = None,
        broadcaster: Broadcaster | None = None,
        gate: BettingGateProtocol | None = None,
    ) -> None:
        self._repo: BetRepositoryProtocol = repo or BetRepository()
        self._ledger: LedgerProtocol = ledger or LedgerRepository()
        self._users: UserLookupProtocol = users or UserRepository()
        self._broadcaster = broadcaster
        self._gate = gate

    def bind_gate(self, gate: BettingGateProtocol) -> None:
        """The clock is built after the book, so it is attached afterwards."""
        self._gate = gate

    async def place_bet(
        self,
        db: AsyncSession,
        username: str,
        period: int,
        side: str | BetSide,
        amount: int,
    ) -> Bet:
        if amount <= 0:
            raise InvalidBetError(f"amount must be positive, got {amount}")
        bet_side = parse_side(side)
        if self._gate is None:
            raise InternalError("Bet book is not attached to a round clock")

        user = await self._users.get_by_username(db, username)
        if user is None:
            raise UserNotFoundError(username)

        bet = Bet(
            id=generate_id(),
            user_id=user.id,
            username=user.username,
            period=period,
            side=bet_side.value,
            amount=amount,
        )
        async with self._gate.betting_window(period):
            try:
                await self._ledger.debit(
                    db,
                    user.id,
                    amount,
                    LedgerEntryType.BET_STAKE,
                    "BET",
                    bet.id,
                    f"Bet placed - Period {period}",
                )
                saved = await self._repo.insert(db, bet)
                await db.commit()
            except Exception:
                await db.rollback()
                raise

        logger.info(
            "bet %s: %s staked %d on %s for period %d",
            saved.id, saved.username, saved.amount, saved.side, saved.period,
        )
        if self._broadcaster is not None:
            self._broadcaster.publish(
                BetPlaced(
                    period=saved.period,
                    username=saved.username,
                    side=saved.side,
                    amount=saved.amount,
                )
            )
        return saved

    async def snapshot_stakes(self, db: AsyncSession, period: int) -> StakeSnapshot:
        return await self._repo.stake_totals(db, period)

    async def bets_for_round(
        self, db: AsyncSession, period: int, pending_only: bool = False
    ) -> list[Bet]:
        status = BetStatus.PENDING.value if pending_only else None
        return await self._repo.list_by_period(db, period, status)

    async def bets_for_user(self, db: AsyncSession, user_id: str, limit: int = 50) -> list[Bet]:
        return await self._repo.list_by_user(db, user_id, limit)
