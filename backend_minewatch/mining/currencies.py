"""Currencies accepted by the pool API."""

from __future__ import annotations

CURRENCIES: tuple[str, ...] = (
    "bitcoin", "aleo", "alephium", "bells-mm", "bitcion", "bitcoin-cash",
    "conflux", "dash", "elacoin", "ethereum-classic", "ethw", "fractal-bitcoin",
    "fractal-bitcoin-mm", "hathor", "ironfish", "junkcoin", "kadena", "kaspa",
    "litecoin", "luckycoin", "nervos", "nexa", "nmccoin", "pepecoin", "zcash",
    "zen", "dingocoin", "craftcoin", "elastos", "quai", "shibacoin", "canxium",
)

# /hash_rate/info is documented for these only
HASHRATE_SUPPORTED_CURRENCIES: tuple[str, ...] = ("bitcoin", "bitcoin-cash", "litecoin")

DEFAULT_CURRENCY = "bitcoin"


def is_supported(currency: str) -> bool:
    return currency in CURRENCIES
