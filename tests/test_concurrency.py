"""Thread-safety tests for LFUCache."""

import random
import threading

from lfucache import LFUCache


def run_threads(target, n_threads: int):
    threads = [threading.Thread(target=target, args=(t,)) for t in range(n_threads)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()


class TestConcurrentWrites:
    """Concurrent inserts must not corrupt the index."""

    def test_unbounded_distinct_keys(self):
        """Test every distinct key from every thread is kept."""
        cache = LFUCache()

        def writer(tid):
            for i in range(500):
                cache.set(f"t{tid}-{i}", i)

        run_threads(writer, 8)

        keys = cache.keys()
        assert len(cache) == 8 * 500
        assert len(keys) == len(set(keys)) == 8 * 500

    def test_same_key_overwrites(self):
        """Test racing writers to one key leave a single entry."""
        cache = LFUCache()

        def writer(tid):
            for i in range(1000):
                cache.set("shared", (tid, i))

        run_threads(writer, 8)

        assert cache.keys() == ["shared"]
        assert cache.get_frequency("shared") == 1

    def test_bounded_never_exceeds_upper(self):
        """Test concurrent inserts never push the cache past upper_bound."""
        upper, lower = 50, 20
        cache = LFUCache(upper, lower)
        violations = []
        done = threading.Event()

        def monitor():
            while not done.is_set():
                size = len(cache)
                if size > upper:
                    violations.append(size)

        watcher = threading.Thread(target=monitor)
        watcher.start()

        def writer(tid):
            for i in range(2000):
                cache.set(f"t{tid}-{i}", i)

        try:
            run_threads(writer, 8)
        finally:
            done.set()
            watcher.join()

        assert violations == []
        assert len(cache) <= upper
        stats = cache.get_stats()
        assert len(cache) == 8 * 2000 - stats['evicted']


class TestMixedWorkload:
    """Readers, writers and evictors running together."""

    def test_population_accounting(self):
        """Test len() equals unique inserts minus everything evicted."""
        cache = LFUCache(upper_bound=200, lower_bound=100)
        inserted = [0] * 8
        removed = [0] * 8

        def worker(tid):
            rng = random.Random(tid)
            for i in range(3000):
                op = rng.random()
                if op < 0.5:
                    cache.set(f"t{tid}-{i}", i)
                    inserted[tid] += 1
                elif op < 0.95:
                    cache.get(f"t{rng.randrange(8)}-{rng.randrange(i + 1)}")
                else:
                    removed[tid] += cache.evict(rng.randrange(10))

        run_threads(worker, 8)

        keys = cache.keys()
        evicted = cache.get_stats()['evicted']
        assert len(keys) == len(set(keys)) == len(cache)
        assert len(cache) <= 200
        assert len(cache) == sum(inserted) - evicted
        assert sum(removed) <= evicted

    def test_frequency_counts_are_not_lost(self):
        """Test concurrent gets each add exactly one to the frequency."""
        cache = LFUCache()
        cache.set("hot", 0)

        def reader(tid):
            for _ in range(1000):
                cache.get("hot")

        run_threads(reader, 8)

        assert cache.get_frequency("hot") == 1 + 8 * 1000
        assert cache.get_stats()['hits'] == 8 * 1000
