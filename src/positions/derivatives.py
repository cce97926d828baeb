"""
Derivatives venue — позиции, pending ордера и claimable funding

Для каждой открытой позиции:
    net = collateral + floor(pnl / price) + floor(impact / price) - ceil(costs / price)

где price — USD цена одной сырой единицы collateral токена (USD * 1e30),
а pnl/impact/costs — USD * 1e30.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Прибыль и impact конвертируются floor, издержки ceil (округление в пользу пула)
2. net <= 0 → запись не добавляется (отрицательного вклада нет)
3. collateral_price == 0 → raw collateral без поправок
4. Отказ enriched reader-а (revert или невалидный payload) → raw collateral
   каждой открытой позиции, а не пропуск позиций
5. Decrease/swap ордера не учитываются: они не резервируют стоимость
"""

import logging

from jsonschema import ValidationError

from src.core.contracts import validate_position_info
from src.core.domain.pool import VenueType
from src.core.domain.position import PendingOrder, PositionEntry, PositionInfo
from src.core.errors import VenueReaderError
from src.core.interfaces import DerivativesReader
from src.core.math.fixed_point import div_ceil, div_floor

logger = logging.getLogger(__name__)


# =============================================================================
# NET COLLATERAL
# =============================================================================


def net_collateral(info: PositionInfo) -> int:
    """
    Стоимость позиции в сырых единицах collateral токена.

    Может быть отрицательной; фильтрация — забота вызывающего.
    """
    price = info.collateral_price
    if price == 0:
        return info.collateral_amount

    return (
        info.collateral_amount
        + div_floor(info.pnl_usd, price)
        + div_floor(info.price_impact_usd, price)
        - div_ceil(info.total_cost_usd, price)
    )


def parse_position_info(payload: dict) -> PositionInfo:
    """
    Валидация payload reader-а по контракту и сборка модели.

    Raises:
        ValidationError: payload не соответствует derivatives_position_info
    """
    validate_position_info(payload)
    return PositionInfo(**payload)


# =============================================================================
# COLLECTORS
# =============================================================================


def _position_entries(account: str, reader: DerivativesReader) -> list[PositionEntry]:
    entries: list[PositionEntry] = []

    try:
        infos = [parse_position_info(p) for p in reader.get_position_infos(account)]
    except (VenueReaderError, ValidationError) as e:
        logger.warning(
            "derivatives position info unavailable for %s, using raw collateral: %s",
            account,
            e,
        )
        return _raw_collateral_entries(account, reader)

    for info in infos:
        net = net_collateral(info)
        if net > 0:
            entries.append(
                PositionEntry(
                    token=info.collateral_token,
                    amount=net,
                    venue=VenueType.DERIVATIVES,
                )
            )
        else:
            logger.debug("position %s has non-positive net value %d, omitted", info.key, net)

        try:
            entries.extend(_claimable_entries(info, reader))
        except VenueReaderError as e:
            logger.warning(
                "claimable funding of position %s skipped, market unavailable: %s",
                info.key,
                e,
            )

    return entries


def _raw_collateral_entries(account: str, reader: DerivativesReader) -> list[PositionEntry]:
    return [
        PositionEntry(
            token=position.collateral_token,
            amount=position.collateral_amount,
            venue=VenueType.DERIVATIVES,
        )
        for position in reader.get_positions(account)
        if position.collateral_amount > 0
    ]


def _claimable_entries(info: PositionInfo, reader: DerivativesReader) -> list[PositionEntry]:
    if info.claimable_long_token_amount == 0 and info.claimable_short_token_amount == 0:
        return []

    market = reader.get_market(info.market)
    entries = []
    for token, amount in (
        (market.long_token, info.claimable_long_token_amount),
        (market.short_token, info.claimable_short_token_amount),
    ):
        if amount > 0:
            entries.append(PositionEntry(token=token, amount=amount, venue=VenueType.DERIVATIVES))
    return entries


def _order_entries(order: PendingOrder) -> list[PositionEntry]:
    if not order.order_type.is_increase:
        return []

    entries = []
    if order.initial_collateral_amount > 0:
        entries.append(
            PositionEntry(
                token=order.initial_collateral_token,
                amount=order.initial_collateral_amount,
                venue=VenueType.DERIVATIVES,
            )
        )
    if order.execution_fee > 0:
        entries.append(
            PositionEntry(
                token=order.execution_fee_token,
                amount=order.execution_fee,
                venue=VenueType.DERIVATIVES,
            )
        )
    return entries


def collect_derivatives_positions(
    account: str, reader: DerivativesReader
) -> list[PositionEntry]:
    """
    Все записи derivatives площадки для аккаунта пула.

    Порядок: открытые позиции (и их claimable funding), затем increase ордера.

    Отказ market metadata или listing ордеров отбрасывает только
    соответствующие записи.

    Raises:
        VenueReaderError: если недоступен raw listing позиций
    """
    entries = _position_entries(account, reader)
    try:
        orders = reader.get_orders(account)
    except VenueReaderError as e:
        logger.warning("derivatives orders of %s unavailable, not counted: %s", account, e)
        return entries

    for order in orders:
        entries.extend(_order_entries(order))
    return entries
