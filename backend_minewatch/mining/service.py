"""
Mining service: refresh cycle and read paths over pool client, cache and fallback.

Responsibilities:
- refresh(): one explicit refresh cycle. Invalidates the account's cache
  entries, fans out all pool calls concurrently, falls back per kind on
  failure, caches every kind (live or simulated) and reports failure of the
  core calls (balance, hashrate) to the caller.
- get_*(): read paths. Cache hit, else a pool call for that kind, else
  simulated data. Never raise on pool or credential failures.
- test_connection(): single hashrate call to validate credentials; never
  touches the cache.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Awaitable, Callable

from backend_minewatch.core.exceptions import CredentialsMissing, MiningPoolError, UnknownUpstreamError
from backend_minewatch.minewatch_logging import bind_account, get_logger
from backend_minewatch.mining.cache import CacheKey, RefreshCache
from backend_minewatch.mining.credentials import CredentialResolver
from backend_minewatch.mining.fallback import FallbackGenerator
from backend_minewatch.mining.models import (
    ActivityEvent,
    BalanceSnapshot,
    Credentials,
    DataKind,
    HashrateSnapshot,
    MiningData,
    Snapshot,
    Source,
    Transaction,
    WorkerRecord,
    utc_now_iso,
)
from backend_minewatch.mining.pool_client import TX_TYPE_ALL, TX_TYPE_REVENUE, PoolClient
from backend_minewatch.mining.transactions import (
    ACTIVITY_WINDOW_SEC,
    INCOME_WINDOW_SEC,
    aggregate_income,
    merge_activity,
    transactions_to_activity,
)

logger = get_logger(__name__)

# Failures that read paths turn into simulated data
FALLBACK_ERRORS = (MiningPoolError, CredentialsMissing)


class MiningService:
    def __init__(
        self,
        client: PoolClient,
        cache: RefreshCache,
        resolver: CredentialResolver,
        fallback: FallbackGenerator,
        *,
        simulated_ttl_sec: float | None = 60.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._client = client
        self._cache = cache
        self._resolver = resolver
        self._fallback = fallback
        self._simulated_ttl = simulated_ttl_sec
        self._clock = clock

    # ------------------------------------------------------------------
    # Cache helpers
    # ------------------------------------------------------------------

    def cache_key(self, api_key: str | None, account: str | None, currency: str) -> CacheKey:
        key, name = self._resolver.peek(api_key, account)
        return CacheKey.build(name, currency, key)

    def _store(self, kind: DataKind, key: CacheKey, data: Any, source: Source) -> Snapshot:
        snapshot = Snapshot(kind=kind, data=data, source=source, fetched_at=self._clock())
        ttl = self._simulated_ttl if source is Source.SIMULATED else None
        self._cache.put(kind, key, snapshot, ttl_sec=ttl)
        return snapshot

    def _known_mining_data(self, key: CacheKey, account: str, currency: str) -> MiningData:
        """Last cached mining data for key, or a freshly simulated one as a base for derived fallbacks."""
        cached = self._cache.get(DataKind.MINING_DATA, key)
        if cached is not None:
            return cached.data
        return self._fallback.mining_data(account, currency)

    # ------------------------------------------------------------------
    # Refresh cycle
    # ------------------------------------------------------------------

    async def refresh(
        self,
        api_key: str | None,
        account: str | None,
        currency: str,
    ) -> Snapshot:
        """
        Explicit refresh. Raises CredentialsMissing when nothing resolves, or
        the balance/hashrate error after caching fallbacks for every kind.
        """
        creds = self._resolver.resolve(api_key, account)
        key = CacheKey.build(creds.account_name, currency, creds.api_key)
        previous = self._cache.get(DataKind.MINING_DATA, key)
        self._cache.invalidate(key)
        seed = previous.data if previous is not None and previous.is_live else None
        return await self._run_cycle(creds, currency, key, seed)

    async def _run_cycle(
        self,
        creds: Credentials,
        currency: str,
        key: CacheKey,
        seed: MiningData | None = None,
    ) -> Snapshot:
        log = bind_account(creds.account_name, currency)
        now = self._clock()
        end = int(now)
        results = await asyncio.gather(
            self._client.fetch_balance(creds, currency),
            self._client.fetch_hashrate(creds, currency),
            self._client.fetch_workers(creds, currency),
            self._client.fetch_hashrate_history(creds, currency),
            self._client.fetch_transactions(
                creds, currency, tx_type=TX_TYPE_REVENUE, start_time=end - INCOME_WINDOW_SEC, end_time=end
            ),
            self._client.fetch_transactions(
                creds, currency, tx_type=TX_TYPE_ALL, start_time=end - ACTIVITY_WINDOW_SEC, end_time=end
            ),
            return_exceptions=True,
        )
        names = ("balance", "hashrate", "workers", "hashrate_history", "income_history", "activity")
        results = [self._as_pool_error(name, r, log) for name, r in zip(names, results)]
        balance_r, hashrate_r, workers_r, history_r, income_r, activity_r = results
        errors = {name: r.code for name, r in zip(names, results) if isinstance(r, MiningPoolError)}

        balance_live = not isinstance(balance_r, MiningPoolError)
        hashrate_live = not isinstance(hashrate_r, MiningPoolError)
        balance: BalanceSnapshot = balance_r if balance_live else self._fallback.balance()
        hashrate: HashrateSnapshot = hashrate_r if hashrate_live else self._fallback.hashrate(creds.account_name)

        if isinstance(workers_r, MiningPoolError):
            workers: list[WorkerRecord] = self._fallback.workers(now=now)
            self._store(DataKind.WORKERS, key, workers, Source.SIMULATED)
        else:
            workers = workers_r
            self._store(DataKind.WORKERS, key, workers, Source.LIVE)

        mining_data = MiningData(
            balance=balance,
            hashrate=hashrate,
            currency=currency,
            timestamp=utc_now_iso(),
            workers=workers,
        )
        core_live = balance_live and hashrate_live
        snapshot = self._store(
            DataKind.MINING_DATA, key, mining_data, Source.LIVE if core_live else Source.SIMULATED
        )

        if isinstance(history_r, MiningPoolError):
            basis = seed if (seed is not None and not hashrate_live) else mining_data
            base_rate = basis.hashrate.h24_hash_rate
            self._store(
                DataKind.HASHRATE_HISTORY, key, self._fallback.hashrate_history(base_rate, now), Source.SIMULATED
            )
        else:
            self._store(DataKind.HASHRATE_HISTORY, key, history_r, Source.LIVE)

        if isinstance(income_r, MiningPoolError):
            basis = seed if (seed is not None and not balance_live) else mining_data
            base_income = basis.balance.yesterday_income
            self._store(
                DataKind.INCOME_HISTORY, key, self._fallback.income_history(base_income, now), Source.SIMULATED
            )
        else:
            self._store(DataKind.INCOME_HISTORY, key, aggregate_income(income_r, now), Source.LIVE)

        self._store(DataKind.ACTIVITY, key, *self._activity_from(activity_r, currency, now))

        log.info(
            "mining_refresh_done",
            live=core_live,
            failed=sorted(errors),
            errors=errors,
            worker_count=len(workers),
        )
        if not balance_live:
            raise balance_r
        if not hashrate_live:
            raise hashrate_r
        return snapshot

    @staticmethod
    def _as_pool_error(name: str, result: Any, log: Any) -> Any:
        """
        One sub-call's outcome. Unexpected exceptions count as an upstream
        failure of that kind only; cancellation and interpreter exits propagate.
        """
        if not isinstance(result, BaseException) or isinstance(result, MiningPoolError):
            return result
        if not isinstance(result, Exception):
            raise result
        log.error("mining_refresh_call_crashed", kind=name, error=repr(result), exc_info=result)
        wrapped = UnknownUpstreamError(detail=f"{name}: {result!r}")
        wrapped.__cause__ = result
        return wrapped

    def _activity_from(
        self,
        result: list[Transaction] | MiningPoolError,
        currency: str,
        now: float,
    ) -> tuple[list[ActivityEvent], Source]:
        if isinstance(result, MiningPoolError):
            return self._fallback.activity(now), Source.SIMULATED
        real = transactions_to_activity(result, currency, now)
        return merge_activity(real, self._fallback.activity(now)), Source.LIVE

    # ------------------------------------------------------------------
    # Read paths (never raise on pool/credential failures)
    # ------------------------------------------------------------------

    async def get_mining_data(self, api_key: str | None, account: str | None, currency: str) -> Snapshot:
        key = self.cache_key(api_key, account, currency)
        cached = self._cache.get(DataKind.MINING_DATA, key)
        if cached is not None:
            return cached
        try:
            creds = self._resolver.resolve(api_key, account)
            return await self._run_cycle(creds, currency, key)
        except FALLBACK_ERRORS as e:
            logger.warning("mining_data_fallback", account=key.account, currency=currency, error=e.code)
            cached = self._cache.get(DataKind.MINING_DATA, key)
            if cached is not None:
                return cached
            data = self._fallback.mining_data(key.account, currency)
            return self._store(DataKind.MINING_DATA, key, data, Source.SIMULATED)

    async def _read_kind(
        self,
        kind: DataKind,
        api_key: str | None,
        account: str | None,
        currency: str,
        fetch: Callable[[Credentials], Awaitable[Any]],
        simulate: Callable[[CacheKey], Any],
    ) -> Snapshot:
        key = self.cache_key(api_key, account, currency)
        cached = self._cache.get(kind, key)
        if cached is not None:
            return cached
        try:
            creds = self._resolver.resolve(api_key, account)
            data = await fetch(creds)
        except FALLBACK_ERRORS as e:
            logger.warning("mining_read_fallback", kind=kind.value, account=key.account, currency=currency, error=e.code)
            return self._store(kind, key, simulate(key), Source.SIMULATED)
        return self._store(kind, key, data, Source.LIVE)

    async def get_hashrate_history(self, api_key: str | None, account: str | None, currency: str) -> Snapshot:
        def simulate(key: CacheKey) -> Any:
            base = self._known_mining_data(key, key.account, currency)
            return self._fallback.hashrate_history(base.hashrate.h24_hash_rate, self._clock())

        return await self._read_kind(
            DataKind.HASHRATE_HISTORY,
            api_key,
            account,
            currency,
            lambda creds: self._client.fetch_hashrate_history(creds, currency),
            simulate,
        )

    async def get_income_history(self, api_key: str | None, account: str | None, currency: str) -> Snapshot:
        async def fetch(creds: Credentials) -> Any:
            now = self._clock()
            end = int(now)
            txs = await self._client.fetch_transactions(
                creds, currency, tx_type=TX_TYPE_REVENUE, start_time=end - INCOME_WINDOW_SEC, end_time=end
            )
            return aggregate_income(txs, now)

        def simulate(key: CacheKey) -> Any:
            base = self._known_mining_data(key, key.account, currency)
            return self._fallback.income_history(base.balance.yesterday_income, self._clock())

        return await self._read_kind(DataKind.INCOME_HISTORY, api_key, account, currency, fetch, simulate)

    async def get_workers(self, api_key: str | None, account: str | None, currency: str) -> Snapshot:
        return await self._read_kind(
            DataKind.WORKERS,
            api_key,
            account,
            currency,
            lambda creds: self._client.fetch_workers(creds, currency),
            lambda key: self._fallback.workers(now=self._clock()),
        )

    async def get_activity(self, api_key: str | None, account: str | None, currency: str) -> Snapshot:
        async def fetch(creds: Credentials) -> Any:
            now = self._clock()
            end = int(now)
            txs = await self._client.fetch_transactions(
                creds, currency, tx_type=TX_TYPE_ALL, start_time=end - ACTIVITY_WINDOW_SEC, end_time=end
            )
            return merge_activity(transactions_to_activity(txs, currency, now), self._fallback.activity(now))

        return await self._read_kind(
            DataKind.ACTIVITY,
            api_key,
            account,
            currency,
            fetch,
            lambda key: self._fallback.activity(self._clock()),
        )

    # ------------------------------------------------------------------
    # Connection tests (no cache)
    # ------------------------------------------------------------------

    async def test_connection(self, api_key: str | None, account: str | None, currency: str) -> HashrateSnapshot:
        creds = self._resolver.resolve(api_key, account, remember=False)
        return await self._client.fetch_hashrate(creds, currency)

    async def test_default_connection(self, currency: str) -> tuple[Credentials, HashrateSnapshot]:
        """Validate the process-wide default credentials only."""
        creds = self._resolver.default_credentials()
        return creds, await self._client.fetch_hashrate(creds, currency)
