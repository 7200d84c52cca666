import numpy as np

# Two well-separated groups of five 2D points.
SIMPLE_01 = np.array([
    [3.522979, 5.487981],
    [3.768699, 5.364477],
    [3.423602, 5.419900],
    [3.803905, 5.389491],
    [3.936690, 5.663041],
    [6.968136, 7.755556],
    [6.750795, 7.269541],
    [6.593196, 7.850364],
    [6.978178, 7.609850],
    [6.554487, 7.498119],
])

SIMPLE_01_MEDOIDS = [1, 5]
SIMPLE_01_CLUSTERS = [list(range(0, 5)), list(range(5, 10))]

# Observations that coincide exactly; used to produce empty clusters.
DUPLICATES = np.array([
    [0.0, 0.0],
    [0.0, 0.0],
    [3.0, 0.0],
    [3.0, 0.0],
])

BLOB_CENTERS = [(1, 1), (10, 10), (0, 20)]


def make_blobs(n_per_blob=20, scale=1, seed=0):
    """Gaussian blobs around BLOB_CENTERS, concatenated blob by blob."""

    rng = np.random.default_rng(seed)
    return np.concatenate([
        rng.normal(loc=center, scale=scale, size=(n_per_blob, 2))
        for center in BLOB_CENTERS])
