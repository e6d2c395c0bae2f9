import logging
import time
from dataclasses import dataclass, field

import numpy as np

from map_generator import generate_maps, make_rng
from rle_decoder import decode_rle
from universes import DEFAULT_UNIVERSES, UNIVERSES

logger = logging.getLogger(__name__)

# --- CONFIGURATION ---
ITERATIONS = 50000      # generations per (input, universe) run
PRINT_EVERY = 1500      # progress line cadence, in generations
MAPS_QUANTITY = 10
MAP_MIN_SIDE = 30       # inclusive
MAP_MAX_SIDE = 50       # exclusive
SEED_LIMIT = 200000     # random seeds are drawn from [0, SEED_LIMIT)
# ---------------------


@dataclass
class BenchmarkConfig:
    iterations: int = ITERATIONS
    print_every: int = PRINT_EVERY
    maps_quantity: int = MAPS_QUANTITY
    map_min_side: int = MAP_MIN_SIDE
    map_max_side: int = MAP_MAX_SIDE
    seed: int | None = None
    universes: tuple = DEFAULT_UNIVERSES

    def __post_init__(self):
        if self.iterations < 0:
            raise ValueError(f"iterations must be >= 0, got {self.iterations}")
        if self.print_every <= 0:
            raise ValueError(f"print_every must be > 0, got {self.print_every}")
        if self.maps_quantity < 0:
            raise ValueError(f"maps_quantity must be >= 0, got {self.maps_quantity}")
        if self.map_min_side <= 0:
            raise ValueError(f"map_min_side must be > 0, got {self.map_min_side}")
        if self.map_max_side <= self.map_min_side:
            raise ValueError(
                f"map_max_side ({self.map_max_side}) must be greater than "
                f"map_min_side ({self.map_min_side})"
            )
        if not self.universes:
            raise ValueError("at least one universe must be selected")
        self.universes = tuple(self.universes)
        duplicates = sorted({name for name in self.universes if self.universes.count(name) > 1})
        if duplicates:
            raise ValueError(f"universe(s) selected more than once: {', '.join(duplicates)}")
        # Fails early on unknown names
        resolve_universes(self.universes)


@dataclass
class BenchmarkResult:
    label: str
    width: int
    height: int
    iterations: int
    timings_ms: dict = field(default_factory=dict)


def resolve_universes(names):
    """Maps universe names to their classes, keeping the requested order."""
    unknown = [name for name in names if name not in UNIVERSES]
    if unknown:
        raise ValueError(
            f"unknown universe(s) {', '.join(unknown)}; "
            f"choose from {', '.join(UNIVERSES)}"
        )
    return [(name, UNIVERSES[name]) for name in names]


def load_map(grid, universe):
    """Activates every live cell of grid[y, x], visiting x outer and y inner."""
    height, width = grid.shape
    for x in range(width):
        for y in range(height):
            if grid[y, x]:
                universe.activate(x, y)


def time_universe(universe, iterations, print_every, clock=time.perf_counter):
    """
    Runs universe.advance() exactly 'iterations' times and returns the
    elapsed wall-clock time in milliseconds. Loading is not timed.
    """
    start = clock()
    for i in range(1, iterations + 1):
        universe.advance()
        if i % print_every == 0:
            logger.info("%d / %d", i, iterations)
    return (clock() - start) * 1000.0


def _run_variants(label, width, height, loader, config, clock):
    result = BenchmarkResult(label, width, height, config.iterations)
    for name, universe_class in resolve_universes(config.universes):
        universe = universe_class()
        loader(universe)
        elapsed = time_universe(universe, config.iterations, config.print_every, clock)
        logger.info("%s: %s finished in %.1f ms", label, name, elapsed)
        logger.debug("%s: %s final state %s", label, name, universe.stats())
        result.timings_ms[name] = elapsed
    return result


def benchmark_map(grid, config, label="map", clock=time.perf_counter):
    """Times every configured universe on one generated map."""
    height, width = grid.shape
    return _run_variants(label, width, height, lambda universe: load_map(grid, universe),
                         config, clock)


def benchmark_pattern(lines, config, label="pattern", clock=time.perf_counter):
    """
    Times every configured universe on an RLE pattern. 'lines' must be
    re-iterable (a list or a str), since each universe decodes it afresh.
    MalformedPatternError propagates before any universe is timed.
    """
    if isinstance(lines, str):
        lines = lines.splitlines()
    summaries = []

    def loader(universe):
        summaries.append(decode_rle(lines, universe))

    result = _run_variants(label, 0, 0, loader, config, clock)
    if summaries:
        result.width, result.height = summaries[0].width, summaries[0].height
        logger.debug("%s: %d cells activated per universe", label, summaries[0].activations)
    return result


def format_report(result):
    lines = [
        "------------------",
        f"{result.label}",
        f"Map size: {result.width} x {result.height}",
        f"Iterations: {result.iterations}",
        "",
    ]
    for name, elapsed in result.timings_ms.items():
        lines.append(f"{name} = {elapsed:.1f} ms")
    return "\n".join(lines)


def resolve_seed(seed):
    """Returns seed, or a fresh random one when seed is None."""
    if seed is None:
        seed = int(np.random.default_rng().integers(SEED_LIMIT))
    return seed


def run_map_benchmarks(config, clock=time.perf_counter, out=print):
    """
    Generates config.maps_quantity maps from one seeded stream and benchmarks
    each of them, printing a comparison report per map.
    """
    seed = resolve_seed(config.seed)
    logger.info("Using seed %d (pass --seed %d to repeat this run)", seed, seed)

    rng = make_rng(seed)
    maps = generate_maps(rng, config.maps_quantity, config.map_min_side, config.map_max_side)

    results = []
    for index, grid in enumerate(maps, start=1):
        result = benchmark_map(grid, config, label=f"Map {index}/{len(maps)}", clock=clock)
        out(format_report(result))
        results.append(result)
    return results
