#!/usr/bin/env python3
"""
LFU CACHE BENCHMARK
===================
Replays synthetic traces through LFUCache and reports hit rates for a
range of watermark settings, or hammers one cache from several threads.

Usage:
    python bench.py                          # All workloads, default watermarks
    python bench.py --quick                  # Fast mode (10k requests)
    python bench.py -w zipf --upper 500      # One workload
    python bench.py --sweep                  # Compare lower/upper ratios
    python bench.py --threads 8              # Concurrency stress

Examples:
    python bench.py --workload loop --upper 1000 --lower 900
    python bench.py --threads 16 --ops 200000 --log-level DEBUG
"""

import argparse
import random
import sys
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
from lfucache import LFUCache, configure_logging
from lfucache.logging import get_logger

logger = get_logger("lfucache.bench")

# ============================================================================
# CONFIGURATION
# ============================================================================

@dataclass
class BenchConfig:
    workloads: list = field(default_factory=list)  # empty = all
    n_requests: int = 100_000
    n_items: int = 10_000
    upper: int = 1000
    lower: int = 800
    seed: int = 42

    verbose: bool = True
    color: bool = True


# ============================================================================
# OUTPUT HELPERS
# ============================================================================

class Colors:
    BOLD = '\033[1m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    END = '\033[0m'
    GRAY = '\033[90m'

def c(text, color, cfg):
    """Colorize text if enabled."""
    if cfg.color and sys.stdout.isatty():
        return f"{color}{text}{Colors.END}"
    return text

def p(msg="", cfg=None):
    """Print with flush."""
    if cfg is None or cfg.verbose:
        print(msg, flush=True)


# ============================================================================
# SYNTHETIC WORKLOADS
# ============================================================================

def gen_zipf(n_items: int, n: int, alpha: float = 0.99) -> list:
    """Zipfian distribution."""
    weights = [1.0 / (i + 1) ** alpha for i in range(n_items)]
    total = sum(weights)
    weights = [w / total for w in weights]
    return random.choices(range(n_items), weights=weights, k=n)

def gen_loop(cache_size: int, n: int, extra: int = 1) -> list:
    """Loop pattern: cycles through cache_size + extra items."""
    loop_len = cache_size + extra
    return [i % loop_len for i in range(n)]

def gen_temporal(n_items: int, n: int, phases: int = 5) -> list:
    """Temporal locality: hot set changes over time."""
    keys = []
    per_phase = n // phases
    items_per = n_items // phases
    for ph in range(phases):
        start = ph * items_per
        keys.extend(random.randint(start, start + items_per - 1) for _ in range(per_phase))
    return keys

def gen_sequential(n_items: int, n: int) -> list:
    """Sequential scan."""
    return [i % n_items for i in range(n)]


WORKLOADS = {
    "zipf": ("Web-like popularity (a=0.99)", lambda cfg: gen_zipf(cfg.n_items, cfg.n_requests)),
    "zipf-1.2": ("Heavy hitters (a=1.2)", lambda cfg: gen_zipf(cfg.n_items, cfg.n_requests, 1.2)),
    "loop": ("Tight loop (N+1)", lambda cfg: gen_loop(cfg.upper, cfg.n_requests)),
    "temporal": ("Shifting hot set", lambda cfg: gen_temporal(cfg.n_items, cfg.n_requests)),
    "seq": ("Sequential scan", lambda cfg: gen_sequential(cfg.n_items, cfg.n_requests)),
}


# ============================================================================
# BENCHMARK RUNNER
# ============================================================================

def run_trace(trace: list, upper: int, lower: int) -> dict:
    """Read-through replay: get on hit, set on miss. Returns cache stats."""
    cache = LFUCache(upper_bound=upper, lower_bound=lower)
    hits = 0
    for k in trace:
        key = str(k)
        if cache.has(key):
            cache.get(key)
            hits += 1
        else:
            cache.set(key, k)
    stats = cache.get_stats()
    stats['hit_rate'] = hits / len(trace) * 100
    return stats


def print_table(results: dict, title: str, cfg: BenchConfig):
    """Print results table."""
    p(f"\n{c(title, Colors.BOLD, cfg)}", cfg)
    p("-" * 60, cfg)
    p(f"  {'Workload':<12} {'Hit rate':>9} {'Passes':>8} {'Evicted':>9}", cfg)

    best = max((s['hit_rate'] for s in results.values()), default=0)
    for name, s in results.items():
        rate = f"{s['hit_rate']:>8.2f}%"
        if s['hit_rate'] == best:
            rate = c(rate, Colors.GREEN, cfg)
        p(f"  {name:<12} {rate} {s['evictions']:>8} {s['evicted']:>9}", cfg)


def run_workloads(cfg: BenchConfig):
    names = cfg.workloads or list(WORKLOADS)
    results = {}
    for name in names:
        if name not in WORKLOADS:
            p(f"  Unknown workload: {name}", cfg)
            continue
        random.seed(cfg.seed)
        _, gen = WORKLOADS[name]
        results[name] = run_trace(gen(cfg), cfg.upper, cfg.lower)
        logger.info("bench_workload_done", workload=name, hit_rate=round(results[name]['hit_rate'], 2))

    print_table(results, f"Watermarks upper={cfg.upper} lower={cfg.lower}", cfg)


def run_sweep(cfg: BenchConfig):
    """Compare lower/upper ratios at a fixed high-water mark."""
    ratios = [0.5, 0.7, 0.8, 0.9, 0.95, 0.99]
    names = cfg.workloads or list(WORKLOADS)

    p(f"\n{c(f'Watermark sweep (upper={cfg.upper})', Colors.BOLD, cfg)}", cfg)
    p("-" * (14 + 9 * len(ratios)), cfg)
    p(f"  {'Workload':<12}" + "".join(f"{r:>9.2f}" for r in ratios), cfg)

    for name in names:
        if name not in WORKLOADS:
            continue
        random.seed(cfg.seed)
        trace = WORKLOADS[name][1](cfg)
        rates = [run_trace(trace, cfg.upper, max(1, int(cfg.upper * r)))['hit_rate'] for r in ratios]
        p(f"  {name:<12}" + "".join(f"{r:>8.2f}%" for r in rates), cfg)


def run_threads(cfg: BenchConfig, n_threads: int, ops: int):
    """Concurrency stress: mixed get/set/evict from n_threads threads."""
    cache = LFUCache(upper_bound=cfg.upper, lower_bound=cfg.lower)
    inserted = [0] * n_threads
    per_thread = ops // n_threads

    def worker(tid):
        rng = random.Random(cfg.seed + tid)
        for i in range(per_thread):
            r = rng.random()
            if r < 0.3:
                cache.set(f"t{tid}-{i}", i)
                inserted[tid] += 1
            elif r < 0.99:
                cache.get(f"t{rng.randrange(n_threads)}-{rng.randrange(i + 1)}")
            else:
                cache.evict(rng.randrange(max(1, cfg.upper - cfg.lower + 1)))

    threads = [threading.Thread(target=worker, args=(t,)) for t in range(n_threads)]
    start = time.perf_counter()
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    elapsed = time.perf_counter() - start

    keys = cache.keys()
    stats = cache.get_stats()
    consistent = (
        len(keys) == len(set(keys)) == len(cache)
        and len(cache) == sum(inserted) - stats['evicted']
        and (not cache.bounded or cfg.upper <= cfg.lower or len(cache) <= cfg.upper)
    )

    p(f"\n{c(f'Thread stress ({n_threads} threads, {per_thread * n_threads:,} ops)', Colors.BOLD, cfg)}", cfg)
    p("-" * 50, cfg)
    p(f"  Throughput:   {per_thread * n_threads / elapsed:>12,.0f} ops/s", cfg)
    p(f"  Final size:   {len(cache):>12,}", cfg)
    p(f"  Passes:       {stats['evictions']:>12,}", cfg)
    p(f"  Hit rate:     {stats['hit_rate']:>12}", cfg)
    status = c("OK", Colors.GREEN, cfg) if consistent else c("CORRUPT", Colors.RED, cfg)
    p(f"  Index:        {status:>12}", cfg)
    return consistent


# ============================================================================
# MAIN
# ============================================================================

def main():
    parser = argparse.ArgumentParser(
        description="LFU cache benchmark",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --quick                Fast run on all workloads
  %(prog)s -w zipf,loop           Specific workloads
  %(prog)s --sweep                Compare lower/upper ratios
  %(prog)s --threads 8            Concurrency stress
  %(prog)s --list                 Show available workloads
        """
    )
    parser.add_argument("--quick", action="store_true", help="Quick mode (10k requests)")
    parser.add_argument("-w", "--workload", type=str, help="Comma-separated workloads")
    parser.add_argument("--upper", type=int, default=1000, help="High-water mark")
    parser.add_argument("--lower", type=int, default=800, help="Low-water mark")
    parser.add_argument("--sweep", action="store_true", help="Sweep lower/upper ratios")
    parser.add_argument("--threads", type=int, default=0, help="Run thread stress with N threads")
    parser.add_argument("--ops", type=int, default=100_000, help="Total ops for thread stress")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--list", action="store_true", help="List available workloads")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Log level")
    parser.add_argument("--no-color", action="store_true", help="Disable colors")
    parser.add_argument("-q", "--quiet", action="store_true", help="Less output")
    args = parser.parse_args()

    if args.list:
        print("\nAvailable workloads:")
        print("-" * 50)
        for name, (desc, _) in WORKLOADS.items():
            print(f"  {name:<12} {desc}")
        print()
        return

    configure_logging(args.log_level)

    cfg = BenchConfig(
        workloads=args.workload.split(",") if args.workload else [],
        n_requests=10_000 if args.quick else 100_000,
        upper=args.upper,
        lower=args.lower,
        seed=args.seed,
        verbose=not args.quiet,
        color=not args.no_color,
    )

    if args.threads:
        ok = run_threads(cfg, args.threads, args.ops)
        sys.exit(0 if ok else 1)

    start = time.time()
    if args.sweep:
        run_sweep(cfg)
    else:
        run_workloads(cfg)
    p(f"\n{c(f'Completed in {time.time() - start:.1f}s', Colors.GRAY, cfg)}", cfg)


if __name__ == "__main__":
    main()
