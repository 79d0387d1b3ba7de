# runtime/rng.py
from functools import cache
from zlib import crc32

import numpy as np


def _tag(s: str) -> int:
    return int(crc32(s.encode("utf-8")) & 0xFFFFFFFF)


class RNGRegistry:
    """
    Seeded numpy Generators, one per stream name (e.g. "pivots").
    A stream is seeded from [master_seed, toolkit tag, name tag], so toolkits
    sharing a seed still draw different pivots.
    """

    def __init__(self, master_seed: int, *, toolkit: str = "pathkit"):
        self.master_seed = int(master_seed) & 0xFFFFFFFF
        self.toolkit_tag = _tag(toolkit)

    @cache
    def stream(self, name: str) -> np.random.Generator:
        ss = np.random.SeedSequence(entropy=[self.master_seed, self.toolkit_tag, _tag(name)])
        return np.random.Generator(np.random.PCG64(ss))
