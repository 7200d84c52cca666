"""Worker-pool helpers for the CPU-bound clustering passes.

Work is handed to joblib's thread backend: the numpy kernels that do the
heavy lifting release the GIL, and threads can share the (read-only)
dataset without copying it to worker processes.
"""

import os
import multiprocessing as mp

import numpy as np

from joblib import Parallel, delayed

from ..exception import ImproperlyConfigured


def auto_nprocs():
    return int(os.getenv('OMP_NUM_THREADS', mp.cpu_count()))


def check_nprocs(n_procs):
    """Resolve `n_procs` to a positive worker count.

    `None` means "use auto_nprocs()".
    """
    if n_procs is None:
        return auto_nprocs()

    if isinstance(n_procs, bool) or not isinstance(
            n_procs, (int, np.integer)) or n_procs < 1:
        raise ImproperlyConfigured(
            "n_procs must be None or a positive integer, got %r." % (n_procs,))

    return int(n_procs)


def chunk_bounds(n_items, n_chunks):
    """Split range(n_items) into at most `n_chunks` contiguous,
    non-empty (start, stop) pairs of near-equal size, in order.
    """

    if n_items <= 0:
        return []

    n_chunks = max(1, min(n_chunks, n_items))
    edges = np.linspace(0, n_items, n_chunks + 1).astype(int)

    return [(int(a), int(b)) for a, b in zip(edges[:-1], edges[1:]) if b > a]


def parallel_map(func, items, n_procs=None):
    """Apply `func` to every element of `items` on a bounded thread
    pool, returning the results in the order of `items`.

    With a single worker (or a single item) the calls run inline, which
    keeps tracebacks simple and avoids pool startup costs.
    """

    items = list(items)
    n_procs = check_nprocs(n_procs)

    if n_procs == 1 or len(items) <= 1:
        return [func(item) for item in items]

    return Parallel(n_jobs=min(n_procs, len(items)), prefer='threads')(
        delayed(func)(item) for item in items)
