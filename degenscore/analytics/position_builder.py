"""
Position builder: fold a time-ordered trade sequence into per-asset positions.

Per mint: None -> Open on buy; Open -> Open on further buys (DCA blend) and on
partial sells; Open -> Closed once asset_sold >= close_tolerance * asset_bought.
Closed positions are archived into PositionBook.closed before a later buy of
the same mint opens a fresh position, so re-entry never loses history.
"""

from __future__ import annotations

from collections.abc import Iterable

from degenscore.analytics.models import Position, PositionBook, Trade, TradeDirection
from degenscore.config.settings import AnalysisConfig
from degenscore.degen_logging import get_logger

logger = get_logger(__name__)


def _open_position(trade: Trade) -> Position:
    return Position(
        asset_mint=trade.asset_mint,
        entry_time=trade.timestamp,
        buy_base_total=trade.base_amount,
        asset_bought=trade.asset_amount,
        entry_price=trade.price_per_asset,
    )


def _apply_buy(position: Position, trade: Trade) -> None:
    position.buy_base_total += trade.base_amount
    position.asset_bought += trade.asset_amount
    position.entry_price = position.buy_base_total / position.asset_bought
    position.trade_count += 1


def _apply_sell(position: Position, trade: Trade) -> None:
    position.sell_base_total = (position.sell_base_total or 0.0) + trade.base_amount
    position.asset_sold = (position.asset_sold or 0.0) + trade.asset_amount
    position.exit_price = position.sell_base_total / position.asset_sold
    position.exit_time = trade.timestamp
    position.profit_loss = position.sell_base_total - position.buy_base_total
    position.profit_loss_percent = position.profit_loss / position.buy_base_total * 100
    position.hold_time = trade.timestamp - position.entry_time
    position.trade_count += 1


def _close(position: Position, config: AnalysisConfig) -> None:
    position.is_open = False
    pct = position.profit_loss_percent or 0.0
    position.is_moonshot = pct >= config.moonshot_threshold_pct
    position.is_rug = pct <= config.rug_threshold_pct


def build_positions(
    trades: Iterable[Trade],
    config: AnalysisConfig | None = None,
) -> PositionBook:
    """
    Build the position book from trades (expected ascending by timestamp).

    Sells with no open position for their mint (history truncated before the
    buy, or leftovers after a close) are ignored and counted as orphan_sells.
    """
    config = config or AnalysisConfig()
    book = PositionBook()

    for trade in trades:
        mint = trade.asset_mint
        position = book.open.get(mint)

        if trade.direction == TradeDirection.BUY:
            if position is None:
                book.open[mint] = _open_position(trade)
            else:
                _apply_buy(position, trade)
            continue

        if position is None:
            book.orphan_sells += 1
            continue

        _apply_sell(position, trade)
        if position.asset_sold >= config.close_tolerance * position.asset_bought:
            _close(position, config)
            book.closed.append(position)
            del book.open[mint]

    if book.orphan_sells:
        logger.info("position_orphan_sells", count=book.orphan_sells)
    logger.debug(
        "positions_built",
        closed=len(book.closed),
        open=len(book.open),
        rugs=sum(1 for p in book.closed if p.is_rug),
        moonshots=sum(1 for p in book.closed if p.is_moonshot),
    )
    return book
