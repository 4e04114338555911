import asyncio
import datetime as dt
import threading
import unittest

from lottobridge.cache import ResultCache
from lottobridge.query import QueryService
from lottobridge.types import DrawResult

RESULT = DrawResult(dt.datetime(2024, 5, 1, 16, 0, tzinfo=dt.timezone.utc), "123-4567", "890-1234")


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.value = start

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


class CountingEngine:
    def __init__(self, result: DrawResult = RESULT, delay: float = 0.0) -> None:
        self._result = result
        self._delay = delay
        self.calls = 0
        self._lock = threading.Lock()

    async def reconcile(self) -> DrawResult:
        with self._lock:
            self.calls += 1
        if self._delay:
            await asyncio.sleep(self._delay)
        return self._result


class ResultCacheTests(unittest.TestCase):
    def test_empty_cache_misses(self) -> None:
        cache = ResultCache(60, clock=FakeClock())
        self.assertIsNone(cache.get())

    def test_hit_within_ttl_and_miss_after(self) -> None:
        cache = ResultCache(60)
        cache.put(RESULT, now=100.0)

        self.assertIs(cache.get(now=100.0), RESULT)
        self.assertIs(cache.get(now=159.9), RESULT)
        self.assertIsNone(cache.get(now=160.0))

    def test_put_overwrites_single_entry(self) -> None:
        clock = FakeClock()
        cache = ResultCache(60, clock=clock)
        newer = DrawResult(RESULT.observation_date, "999-9999", None)

        cache.put(RESULT)
        clock.advance(10)
        cache.put(newer)
        clock.advance(55)

        self.assertIs(cache.get(), newer)

    def test_clear_drops_entry(self) -> None:
        cache = ResultCache(60, clock=FakeClock())
        cache.put(RESULT)
        cache.clear()
        self.assertIsNone(cache.get())

    def test_rejects_non_positive_ttl(self) -> None:
        with self.assertRaises(ValueError):
            ResultCache(0)


class QueryServiceTests(unittest.TestCase):
    def test_reconciles_once_while_fresh(self) -> None:
        clock = FakeClock()
        engine = CountingEngine()
        service = QueryService(engine, ResultCache(60, clock=clock))

        first = service.latest()
        clock.advance(59)
        second = service.latest()

        self.assertIs(first, RESULT)
        self.assertIs(second, RESULT)
        self.assertEqual(engine.calls, 1)

    def test_expired_entry_triggers_exactly_one_refresh(self) -> None:
        clock = FakeClock()
        engine = CountingEngine()
        service = QueryService(engine, ResultCache(60, clock=clock))

        service.latest()
        clock.advance(60)
        service.latest()
        service.latest()

        self.assertEqual(engine.calls, 2)

    def test_concurrent_misses_share_one_reconciliation(self) -> None:
        engine = CountingEngine(delay=0.05)
        service = QueryService(engine, ResultCache(60))
        barrier = threading.Barrier(5)
        results = []

        def worker() -> None:
            barrier.wait()
            results.append(service.latest())

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        self.assertEqual(engine.calls, 1)
        self.assertEqual(results, [RESULT] * 5)

    def test_reconciliation_error_is_not_cached(self) -> None:
        class FailingEngine:
            calls = 0

            async def reconcile(self) -> DrawResult:
                FailingEngine.calls += 1
                raise RuntimeError("defect")

        cache = ResultCache(60, clock=FakeClock())
        service = QueryService(FailingEngine(), cache)

        with self.assertRaises(RuntimeError):
            service.latest()
        with self.assertRaises(RuntimeError):
            service.latest()
        self.assertEqual(FailingEngine.calls, 2)
        self.assertIsNone(cache.get())


if __name__ == "__main__":
    unittest.main()
