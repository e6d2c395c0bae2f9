import logging

import numpy as np

logger = logging.getLogger(__name__)


def make_rng(seed):
    """Returns the single random stream every map of a run is drawn from."""
    return np.random.default_rng(seed)


def generate_map(rng, min_side, max_side):
    """
    Draws one random board with sides in [min_side, max_side).

    Draw order is fixed: width, then height, then one boolean per cell
    visiting x in the outer loop and y in the inner loop. The result is
    indexed grid[y, x].
    """
    span = max_side - min_side
    width = min_side + int(rng.integers(0, span))
    height = min_side + int(rng.integers(0, span))

    # Shape (width, height) in C order is exactly "for each x, for each y"
    cells = rng.integers(0, 2, size=(width, height)).astype(bool)
    return np.ascontiguousarray(cells.T)


def generate_maps(rng, quantity, min_side, max_side):
    """Generates 'quantity' maps from one stream, without reseeding in between."""
    maps = []
    for left in range(quantity, 0, -1):
        logger.info("Generating map: %d left", left)
        grid = generate_map(rng, min_side, max_side)
        logger.debug("Generated %dx%d map with %d live cells",
                     grid.shape[1], grid.shape[0], int(grid.sum()))
        maps.append(grid)
    return maps
