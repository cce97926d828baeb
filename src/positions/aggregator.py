"""
Position Aggregator — нормализация позиций внешних площадок

Dispatch table VenueType → collector. Каждый collector превращает позиции
одной площадки в список PositionEntry(token, signed amount). Новая площадка
добавляется новой записью в таблице, без изменения остального кода.

Отказ reader-а площадки:
- derivatives: деградация к raw collateral внутри collector-а
- остальные: VenueReaderError пробрасывается (Valuation Engine вернёт sentinel)
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Mapping

from src.core.domain.pool import VenueType
from src.core.domain.position import PositionEntry
from src.core.errors import VenueReaderError
from src.core.interfaces import DerivativesReader, LiquidityPositionManager, StakingRegistry
from src.positions.derivatives import collect_derivatives_positions
from src.positions.liquidity import collect_liquidity_positions
from src.positions.staking import collect_staking_positions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VenueReaders:
    """Reader-ы площадок; None — площадка не подключена."""

    staking: StakingRegistry | None = None
    derivatives: DerivativesReader | None = None
    liquidity: LiquidityPositionManager | None = None


Collector = Callable[[str, VenueReaders], list[PositionEntry]]


def _require(reader, venue: VenueType):
    if reader is None:
        raise VenueReaderError(f"no reader configured for venue {venue.value}")
    return reader


def _staking(pool_id: str, readers: VenueReaders) -> list[PositionEntry]:
    return collect_staking_positions(pool_id, _require(readers.staking, VenueType.STAKING))


def _derivatives(pool_id: str, readers: VenueReaders) -> list[PositionEntry]:
    return collect_derivatives_positions(
        pool_id, _require(readers.derivatives, VenueType.DERIVATIVES)
    )


def _liquidity(pool_id: str, readers: VenueReaders) -> list[PositionEntry]:
    return collect_liquidity_positions(pool_id, _require(readers.liquidity, VenueType.LIQUIDITY))


DEFAULT_COLLECTORS: Mapping[VenueType, Collector] = {
    VenueType.STAKING: _staking,
    VenueType.DERIVATIVES: _derivatives,
    VenueType.LIQUIDITY: _liquidity,
}


class PositionAggregator:
    """Сборщик позиций по активным площадкам пула."""

    def __init__(
        self,
        readers: VenueReaders | None = None,
        collectors: Mapping[VenueType, Collector] | None = None,
    ):
        self.readers = readers or VenueReaders()
        self._collectors = dict(collectors or DEFAULT_COLLECTORS)

    def collect_venue(self, pool_id: str, venue: VenueType) -> list[PositionEntry]:
        """Записи одной площадки."""
        try:
            collector = self._collectors[venue]
        except KeyError:
            raise VenueReaderError(f"no collector registered for venue {venue.value}") from None
        return collector(pool_id, self.readers)

    def collect_positions(
        self, pool_id: str, venues: Iterable[VenueType]
    ) -> list[PositionEntry]:
        """
        Записи всех активных площадок в детерминированном порядке VenueType.

        Args:
            pool_id: пул (он же аккаунт-владелец позиций)
            venues: активные площадки

        Raises:
            VenueReaderError: площадка не подключена или reader недоступен
        """
        active = set(venues)
        entries: list[PositionEntry] = []
        for venue in VenueType:
            if venue not in active:
                continue
            venue_entries = self.collect_venue(pool_id, venue)
            logger.debug("venue %s: %d entries", venue.value, len(venue_entries))
            entries.extend(venue_entries)
        return entries
