"""options.py

Turn the raw price / yield feed snapshots into the choices offered by the
*Create* form. Pure functions – no I/O, no caching.
"""

from __future__ import annotations

from typing import Sequence

from .model import SourceTokenChoice, TargetChoice, TokenPrice, YieldOption

# Only these mints may fund a vault
ALLOWED_SOURCE_MINTS: tuple[str, ...] = (
    "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",  # USDC
    "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB",  # USDT
    "HzwqbKZw8HxMN6bF2yFZNrht3c2iXXzpKcFu7uBEDKtr",  # EURC
    "2b1kV6DkPAnxd5ixfnxCpjxmKwqjjaYmCZfHsFu24GXo",  # pyUSD
    "So11111111111111111111111111111111111111112",   # SOL
)

UNKNOWN_SYMBOL = "Unknown"


def find_price(prices: Sequence[TokenPrice], mint: str) -> TokenPrice | None:
    """First price row for *mint*, or ``None``."""
    return next((p for p in prices if p.mint == mint), None)


def source_options(prices: Sequence[TokenPrice]) -> list[SourceTokenChoice]:
    """Allow-listed price rows as ``{value: mint, label: symbol}``, sorted by label."""
    if not prices:
        return []

    options = [
        SourceTokenChoice(value=p.mint, label=p.symbol)
        for p in prices
        if p.mint in ALLOWED_SOURCE_MINTS
    ]
    return sorted(options, key=lambda o: o.label)


def target_options(
    yields: Sequence[YieldOption], prices: Sequence[TokenPrice]
) -> list[TargetChoice]:
    """Join yields to prices by mint, drop unresolved symbols, highest APY first.

    ``sorted`` is stable, so equal APYs keep their feed order.
    """
    if not yields or not prices:
        return []

    options = []
    for y in yields:
        price = find_price(prices, y.token_mint)
        options.append(
            TargetChoice(
                value=y.token_mint,
                token_mint=y.token_mint,
                apy=y.apy * 100,  # fraction → percent
                symbol=price.symbol if price and price.symbol else UNKNOWN_SYMBOL,
            )
        )

    known = [o for o in options if o.symbol != UNKNOWN_SYMBOL]
    return sorted(known, key=lambda o: o.apy, reverse=True)


def format_target_option(option: TargetChoice) -> str:
    return f"{option.symbol} (APY: {option.apy:.2f}%)"
