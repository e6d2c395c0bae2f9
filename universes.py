import logging

import numpy as np

logger = logging.getLogger(__name__)


class Universe:
    """
    Common surface of every simulation backend the harness drives:
    activate(x, y) marks a cell alive, advance() runs one B3/S23 generation.
    """
    name = None

    def __init__(self):
        self.generation = 0

    def activate(self, x, y):
        raise NotImplementedError

    def advance(self):
        raise NotImplementedError

    def live_cells(self):
        """Returns the set of (x, y) coordinates of all live cells."""
        raise NotImplementedError

    @property
    def population(self):
        return len(self.live_cells())

    def is_alive(self, x, y):
        return (x, y) in self.live_cells()

    def stats(self):
        return {"generation": self.generation, "population": self.population}


class GridUniverse(Universe):
    """
    Dense numpy board on an unbounded plane. The array grows whenever a live
    cell reaches its border, so cells outside it are always dead.
    """
    name = "grid"
    GROW_MARGIN = 8

    def __init__(self, height=64, width=64):
        super().__init__()
        self.grid = np.zeros((height, width), dtype=np.uint8)
        # Plane coordinate of grid[0, 0]
        self.origin_x = 0
        self.origin_y = 0

    def _pad(self, top, bottom, left, right):
        self.grid = np.pad(self.grid, ((top, bottom), (left, right)), mode='constant')
        self.origin_x -= left
        self.origin_y -= top

    def activate(self, x, y):
        row, col = y - self.origin_y, x - self.origin_x
        height, width = self.grid.shape
        margin = self.GROW_MARGIN

        top = margin - row if row < 0 else 0
        bottom = row - height + 1 + margin if row >= height else 0
        left = margin - col if col < 0 else 0
        right = col - width + 1 + margin if col >= width else 0
        if top or bottom or left or right:
            self._pad(top, bottom, left, right)
            row, col = row + top, col + left

        self.grid[row, col] = 1

    def advance(self):
        grid = self.grid
        if grid.any():
            if grid[0].any() or grid[-1].any() or grid[:, 0].any() or grid[:, -1].any():
                margin = self.GROW_MARGIN
                self._pad(margin, margin, margin, margin)
                grid = self.grid

            # Padded shift-sum neighbour count, edges count as dead
            padded = np.pad(grid, 1, mode='constant')
            nbrs = (padded[:-2, :-2] + padded[:-2, 1:-1] + padded[:-2, 2:] +
                    padded[1:-1, :-2]                + padded[1:-1, 2:] +
                    padded[2:, :-2]  + padded[2:, 1:-1]  + padded[2:, 2:])

            # 1. Survival: live cell with 2 or 3 neighbours
            survive = (grid == 1) & ((nbrs == 2) | (nbrs == 3))
            # 2. Birth: dead cell with exactly 3 neighbours
            birth = (grid == 0) & (nbrs == 3)

            self.grid = (survive | birth).astype(np.uint8)
        self.generation += 1

    def live_cells(self):
        rows, cols = np.nonzero(self.grid)
        return {(int(c) + self.origin_x, int(r) + self.origin_y) for r, c in zip(rows, cols)}

    @property
    def population(self):
        return int(self.grid.sum())

    def is_alive(self, x, y):
        row, col = y - self.origin_y, x - self.origin_x
        height, width = self.grid.shape
        return 0 <= row < height and 0 <= col < width and bool(self.grid[row, col])


class TreeNode:
    """
    Quadtree node. Level 0 nodes are single cells, a level k node covers a
    2**k square split into four level k-1 quadrants.
    """
    __slots__ = ("level", "nw", "ne", "sw", "se", "population", "result")

    def __init__(self, level, nw=None, ne=None, sw=None, se=None, population=0):
        self.level = level
        self.nw = nw
        self.ne = ne
        self.sw = sw
        self.se = se
        self.population = population
        # One-generation successor, filled in by MemoizedTreeUniverse
        self.result = None


class TreeUniverse(Universe):
    """
    Quadtree universe centred on the origin: a level k root covers
    [-2**(k-1), 2**(k-1)) on both axes. Every node is allocated fresh.

    A step computes the level k-1 centre of the root one generation ahead,
    so the root is first expanded until all live cells sit well inside it.
    """
    name = "tree"

    def __init__(self):
        super().__init__()
        self.root = self.empty_tree(3)

    # --- node construction (overridden by the sharing variants) ---

    def leaf(self, alive):
        return TreeNode(0, population=1 if alive else 0)

    def join(self, nw, ne, sw, se):
        population = nw.population + ne.population + sw.population + se.population
        return TreeNode(nw.level + 1, nw, ne, sw, se, population)

    def empty_tree(self, level):
        if level == 0:
            return self.leaf(False)
        child = self.empty_tree(level - 1)
        return self.join(child, child, child, child)

    # --- cell access ---

    def set_bit(self, node, x, y):
        if node.level == 0:
            return self.leaf(True)
        offset = 1 << (node.level - 2) if node.level > 1 else 0
        if x < 0:
            if y < 0:
                return self.join(self.set_bit(node.nw, x + offset, y + offset), node.ne, node.sw, node.se)
            return self.join(node.nw, node.ne, self.set_bit(node.sw, x + offset, y - offset), node.se)
        if y < 0:
            return self.join(node.nw, self.set_bit(node.ne, x - offset, y + offset), node.sw, node.se)
        return self.join(node.nw, node.ne, node.sw, self.set_bit(node.se, x - offset, y - offset))

    def get_bit(self, node, x, y):
        if node.population == 0:
            return 0
        if node.level == 0:
            return 1
        offset = 1 << (node.level - 2) if node.level > 1 else 0
        if x < 0:
            if y < 0:
                return self.get_bit(node.nw, x + offset, y + offset)
            return self.get_bit(node.sw, x + offset, y - offset)
        if y < 0:
            return self.get_bit(node.ne, x - offset, y + offset)
        return self.get_bit(node.se, x - offset, y - offset)

    def _contains(self, x, y):
        limit = 1 << (self.root.level - 1)
        return -limit <= x < limit and -limit <= y < limit

    def activate(self, x, y):
        while not self._contains(x, y):
            self.root = self.expand(self.root)
        self.root = self.set_bit(self.root, x, y)

    def is_alive(self, x, y):
        return self._contains(x, y) and self.get_bit(self.root, x, y) == 1

    @property
    def population(self):
        return self.root.population

    def live_cells(self):
        cells = set()
        corner = -(1 << (self.root.level - 1))
        self._collect(self.root, corner, corner, cells)
        return cells

    def _collect(self, node, left, top, cells):
        if node.population == 0:
            return
        if node.level == 0:
            cells.add((left, top))
            return
        half = 1 << (node.level - 1)
        self._collect(node.nw, left, top, cells)
        self._collect(node.ne, left + half, top, cells)
        self._collect(node.sw, left, top + half, cells)
        self._collect(node.se, left + half, top + half, cells)

    # --- growth ---

    def expand(self, node):
        """Doubles the side of node, keeping its contents centred."""
        border = self.empty_tree(node.level - 1)
        return self.join(self.join(border, border, border, node.nw),
                         self.join(border, border, node.ne, border),
                         self.join(border, node.sw, border, border),
                         self.join(node.se, border, border, border))

    def grow(self, node, minimum_level=3):
        """Expands until every live cell lies in the central half of node."""
        while (node.level < minimum_level or
               node.nw.population != node.nw.se.se.population or
               node.ne.population != node.ne.sw.sw.population or
               node.sw.population != node.sw.ne.ne.population or
               node.se.population != node.se.nw.nw.population):
            node = self.expand(node)
        return node

    # --- stepping ---

    def cell_rule(self, bits):
        # bits is a 3x3 window packed 4 bits per row, the cell itself is bit 5
        alive = (bits >> 5) & 1
        neighbours = bin(bits & 0x757).count("1")
        return self.leaf(neighbours == 3 or (neighbours == 2 and alive == 1))

    def step_level2(self, node):
        """Direct neighbour counting for a 4x4 node; returns its 2x2 centre."""
        bits = 0
        for y in range(-2, 2):
            for x in range(-2, 2):
                bits = (bits << 1) | self.get_bit(node, x, y)
        return self.join(self.cell_rule(bits >> 5), self.cell_rule(bits >> 4),
                         self.cell_rule(bits >> 1), self.cell_rule(bits))

    def centered_subnode(self, node):
        return self.join(node.nw.se, node.ne.sw, node.sw.ne, node.se.nw)

    def centered_horizontal(self, w, e):
        return self.join(w.ne.se, e.nw.sw, w.se.ne, e.sw.nw)

    def centered_vertical(self, n, s):
        return self.join(n.sw.se, n.se.sw, s.nw.ne, s.ne.nw)

    def centered_sub_subnode(self, node):
        return self.join(node.nw.se.se, node.ne.sw.sw, node.sw.ne.ne, node.se.nw.nw)

    def next_generation(self, node):
        """Level k-1 centre of node, one generation ahead."""
        if node.population == 0:
            return node.nw
        if node.level == 2:
            return self.step_level2(node)

        n00 = self.centered_subnode(node.nw)
        n01 = self.centered_horizontal(node.nw, node.ne)
        n02 = self.centered_subnode(node.ne)
        n10 = self.centered_vertical(node.nw, node.sw)
        n11 = self.centered_sub_subnode(node)
        n12 = self.centered_vertical(node.ne, node.se)
        n20 = self.centered_subnode(node.sw)
        n21 = self.centered_horizontal(node.sw, node.se)
        n22 = self.centered_subnode(node.se)

        return self.join(self.next_generation(self.join(n00, n01, n10, n11)),
                         self.next_generation(self.join(n01, n02, n11, n12)),
                         self.next_generation(self.join(n10, n11, n20, n21)),
                         self.next_generation(self.join(n11, n12, n21, n22)))

    def advance(self):
        self.root = self.next_generation(self.grow(self.root))
        self.generation += 1

    def stats(self):
        stats = super().stats()
        stats["level"] = self.root.level
        return stats


class CanonicalTreeUniverse(TreeUniverse):
    """Quadtree where every distinct node exists once (hash-consing)."""
    name = "canon"

    def __init__(self):
        # Both tables must exist before the base class builds the first root
        self._leaves = (TreeNode(0, population=0), TreeNode(0, population=1))
        self._nodes = {}
        super().__init__()

    def leaf(self, alive):
        return self._leaves[1 if alive else 0]

    def join(self, nw, ne, sw, se):
        # Children are canonical already, so identity is equality
        key = (nw, ne, sw, se)
        node = self._nodes.get(key)
        if node is None:
            node = super().join(nw, ne, sw, se)
            self._nodes[key] = node
        return node

    def stats(self):
        stats = super().stats()
        stats["nodes"] = len(self._nodes)
        return stats


class MemoizedTreeUniverse(CanonicalTreeUniverse):
    """Canonical quadtree that caches each node's one-generation successor."""
    name = "memo"

    def next_generation(self, node):
        if node.result is None:
            node.result = super().next_generation(node)
        return node.result


class HashLifeTreeUniverse(CanonicalTreeUniverse):
    """
    Canonical quadtree with a memoized successor(node, j) that moves a node
    2**j generations ahead. advance() is a jump of one generation, and
    advance_by(n) covers n generations with one jump per set bit of n.
    """
    name = "hash"

    def __init__(self):
        self._successors = {}
        super().__init__()

    def successor(self, node, j):
        """Level k-1 centre of node, 2**j generations ahead (j <= k - 2)."""
        if node.population == 0:
            return node.nw
        if node.level == 2:
            return self.step_level2(node)

        j = min(j, node.level - 2)
        key = (node, j)
        cached = self._successors.get(key)
        if cached is not None:
            return cached

        nw, ne, sw, se = node.nw, node.ne, node.sw, node.se
        c1 = self.successor(nw, j)
        c2 = self.successor(self.join(nw.ne, ne.nw, nw.se, ne.sw), j)
        c3 = self.successor(ne, j)
        c4 = self.successor(self.join(nw.sw, nw.se, sw.nw, sw.ne), j)
        c5 = self.successor(self.join(nw.se, ne.sw, sw.ne, se.nw), j)
        c6 = self.successor(self.join(ne.sw, ne.se, se.nw, se.ne), j)
        c7 = self.successor(sw, j)
        c8 = self.successor(self.join(sw.ne, se.nw, sw.se, se.sw), j)
        c9 = self.successor(se, j)

        if j < node.level - 2:
            # Pieces are already 2**j ahead; only recentre them
            result = self.join(self.join(c1.se, c2.sw, c4.ne, c5.nw),
                               self.join(c2.se, c3.sw, c5.ne, c6.nw),
                               self.join(c4.se, c5.sw, c7.ne, c8.nw),
                               self.join(c5.se, c6.sw, c8.ne, c9.nw))
        else:
            # Full speed: two half jumps
            result = self.join(self.successor(self.join(c1, c2, c4, c5), j),
                               self.successor(self.join(c2, c3, c5, c6), j),
                               self.successor(self.join(c4, c5, c7, c8), j),
                               self.successor(self.join(c5, c6, c8, c9), j))

        self._successors[key] = result
        return result

    def advance_by(self, generations):
        if generations < 0:
            raise ValueError(f"cannot run a universe backwards ({generations} generations)")
        j = 0
        while generations:
            if generations & 1:
                # One spare level so a jump of 2**j cannot leave the result
                self.root = self.successor(self.grow(self.root, minimum_level=j + 3), j)
                self.generation += 1 << j
            generations >>= 1
            j += 1

    def advance(self):
        self.advance_by(1)

    def stats(self):
        stats = super().stats()
        stats["successors"] = len(self._successors)
        return stats


# Every backend the harness can run, in report order
UNIVERSES = {
    "hash": HashLifeTreeUniverse,
    "canon": CanonicalTreeUniverse,
    "memo": MemoizedTreeUniverse,
    "tree": TreeUniverse,
    "grid": GridUniverse,
}

DEFAULT_UNIVERSES = ("hash", "canon", "memo")
