"""Outcome resolvers.

``StakeWeightedResolver`` is the house-edge policy: the side carrying more
stake loses. Ties are broken with the injected RNG:

    up == down == 0   -> GREEN or RED, uniformly
    up > down         -> RED   (DOWN wins)
    down > up         -> GREEN (UP wins)
    up == down > 0    -> GREEN_DOJI or RED_DOJI, uniformly

``RandomResolver`` ignores stakes entirely (timing-only variant).

Both accept an admin override through ``force``.
"""

import random
from typing import Protocol

from src.pg_betting.domain.models import StakeSnapshot
from src.pg_common.enums import BetSide, Outcome, ResolutionSource
from src.pg_round.domain.models import RoundConfig, RoundDecision


class OutcomeResolver(Protocol):
    def resolve(self, stakes: StakeSnapshot) -> RoundDecision: ...

    def force(self, side: BetSide) -> RoundDecision: ...


class _BaseResolver:
    def __init__(self, config: RoundConfig, rng: random.Random | None = None) -> None:
        self._config = config
        self._rng = rng or random.Random()

    def multiplier_for(self, outcome: Outcome) -> int:
        if outcome.is_doji:
            return self._config.doji_multiplier_bps
        return self._config.win_multiplier_bps

    def force(self, side: BetSide) -> RoundDecision:
        outcome = Outcome.GREEN if side is BetSide.UP else Outcome.RED
        return self._decide(outcome, ResolutionSource.ADMIN)

    def _coin(self, heads: Outcome, tails: Outcome) -> Outcome:
        return heads if self._rng.random() < 0.5 else tails

    def _decide(self, outcome: Outcome, source: ResolutionSource) -> RoundDecision:
        return RoundDecision(
            outcome=outcome,
            multiplier_bps=self.multiplier_for(outcome),
            display_number=self._rng.randint(1, 9),
            source=source,
        )


class StakeWeightedResolver(_BaseResolver):
    def resolve(self, stakes: StakeSnapshot) -> RoundDecision:
        if stakes.up == 0 and stakes.down == 0:
            outcome = self._coin(Outcome.GREEN, Outcome.RED)
        elif stakes.up > stakes.down:
            outcome = Outcome.RED
        elif stakes.down > stakes.up:
            outcome = Outcome.GREEN
        else:
            outcome = self._coin(Outcome.GREEN_DOJI, Outcome.RED_DOJI)
        return self._decide(outcome, ResolutionSource.HEURISTIC)


class RandomResolver(_BaseResolver):
    def resolve(self, stakes: StakeSnapshot) -> RoundDecision:
        return self._decide(self._coin(Outcome.GREEN, Outcome.RED), ResolutionSource.HEURISTIC)


_POLICIES: dict[str, type[_BaseResolver]] = {
    "stake_weighted": StakeWeightedResolver,
    "random": RandomResolver,
}


def build_resolver(
    policy: str, config: RoundConfig, rng: random.Random | None = None
) -> OutcomeResolver:
    try:
        cls = _POLICIES[policy]
    except KeyError:
        raise ValueError(
            f"Unknown resolver policy {policy!r}, expected one of {sorted(_POLICIES)}"
        ) from None
    return cls(config, rng)
