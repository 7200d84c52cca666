import logging
from collections import namedtuple
from functools import partial

import numpy as np

from scipy.spatial.distance import cdist

from ..exception import ImproperlyConfigured
from ..util.parallel import chunk_bounds, check_nprocs, parallel_map

logger = logging.getLogger(__name__)


class Metric:
    """A distance between two observations, together with its
    one-to-many form.

    Parameters
    ----------
    func : callable
        If `vectorized`, a function like `scipy.spatial.distance.cdist`
        taking two 2D arrays of observations and returning the matrix
        of distances between them. Otherwise, a function taking two
        single observations and returning a non-negative float.
    name : str, default=None
        Human-readable name used in log messages.
    vectorized : bool, default=False
        Whether `func` is a pairwise (matrix) function.
    """

    def __init__(self, func, name=None, vectorized=False):
        self.func = func
        self.name = name if name is not None else getattr(
            func, '__name__', repr(func))
        self.vectorized = vectorized

    def __repr__(self):
        return "Metric(%s)" % self.name

    def __call__(self, a, b):
        if self.vectorized:
            return float(self.func(_as_row(a), _as_row(b))[0, 0])
        return float(self.func(a, b))

    def one_to_many(self, X, y):
        """Distance from every observation in `X` to the single
        observation `y`, as a float array of shape (len(X),).
        """
        if self.vectorized:
            return self.func(np.asarray(X, dtype=float), _as_row(y))[:, 0]

        return np.fromiter((self.func(x, y) for x in X), dtype=float,
                           count=len(X))


def _as_row(x):
    return np.asarray(x, dtype=float).reshape(1, -1)


def minkowski_metric(p):
    """Minkowski distance of order `p` (p=1 is manhattan, p=2 is
    euclidean)."""
    if p <= 0:
        raise ImproperlyConfigured(
            "Minkowski order must be positive, got %s." % p)
    return Metric(partial(cdist, metric='minkowski', p=p),
                  name='minkowski(p=%s)' % p, vectorized=True)


def _cdist_metric(name):
    return Metric(partial(cdist, metric=name), name=name, vectorized=True)


NAMED_METRICS = {
    'euclidean': _cdist_metric('euclidean'),
    'sqeuclidean': _cdist_metric('sqeuclidean'),
    'euclidean_square': _cdist_metric('sqeuclidean'),
    'manhattan': _cdist_metric('cityblock'),
    'cityblock': _cdist_metric('cityblock'),
    'chebyshev': _cdist_metric('chebyshev'),
    'minkowski': minkowski_metric(2),
}


def get_distance_method(metric):
    """Resolve a metric name, Metric or plain callable into a Metric.
    """

    if isinstance(metric, Metric):
        return metric
    elif isinstance(metric, str):
        try:
            return NAMED_METRICS[metric]
        except KeyError:
            raise ImproperlyConfigured(
                "'{}' is not a recognized metric. Choose one of {} or pass "
                "a callable.".format(metric, sorted(NAMED_METRICS))) from None
    elif callable(metric):
        return Metric(metric)
    else:
        raise ImproperlyConfigured(
            "'{}' is not a recognized metric".format(metric))


def distance_matrix(points, metric):
    """Compute the symmetric matrix of pairwise distances between all
    `points` under `metric`.

    Parameters
    ----------
    points : array-like, shape=(n_points, n_features)
        Observations to compare.
    metric : str, Metric or callable
        Anything accepted by `get_distance_method`.

    Returns
    -------
    matrix : ndarray, shape=(n_points, n_points)
        matrix[i, j] is the distance between points[i] and points[j].
    """

    metric = get_distance_method(metric)

    if metric.vectorized:
        X = np.asarray(points, dtype=float)
        return metric.func(X, X)

    return np.array([metric.one_to_many(points, p) for p in points],
                    dtype=float).T


class ClusterResult(namedtuple('ClusterResult',
                               ['medoids',
                                'clusters',
                                'total_deviation',
                                'iterations',
                                'assignments',
                                'distances'])):
    """Immutable outcome of a k-medoids run.

    Attributes
    ----------
    medoids : tuple of int
        Index of the observation serving as the medoid of each cluster.
    clusters : tuple of tuple of int
        Observation indices in each cluster, parallel to `medoids`.
    total_deviation : float
        Sum over all observations of the distance to their medoid.
    iterations : int
        Number of swap iterations performed.
    assignments : ndarray, shape=(n_points,)
        Cluster (position in `medoids`) of each observation, -1 if the
        observation was never assigned.
    distances : ndarray, shape=(n_points,)
        Distance from each observation to its medoid.
    """

    def deviations(self):
        """Total deviation contributed by each cluster."""

        if not self.clusters:
            return np.zeros(0)

        return np.bincount(self.assignments, weights=self.distances,
                           minlength=len(self.medoids))


class Assignment(namedtuple('Assignment',
                            ['labels', 'first', 'second',
                             'total_deviation'])):
    """Nearest-medoid bookkeeping for every observation.

    `first` and `second` hold the distance to the nearest and
    second-nearest medoid; `second` is inf when there is only one
    medoid.
    """
    pass


def assign_to_nearest_medoids(distance, medoids, n_procs=None):
    """Assign each observation to its nearest medoid, remembering the
    distance to the runner-up as well.

    Observations are split into contiguous chunks and each chunk is
    scanned by one worker; every worker writes only the slice it owns.
    Within an observation, medoid slots are scanned in order and a
    strictly smaller distance is required to take over the lead, so the
    earliest slot wins ties.

    Parameters
    ----------
    distance : PointDistance or MatrixDistance
        Distance provider over the dataset.
    medoids : sequence of int
        Observation indices of the current medoids.
    n_procs : int, default=None
        Number of workers. Defaults to `auto_nprocs()`.

    Returns
    -------
    assignment : Assignment
        Labels, first- and second-best distances and their total.
    """

    n_points = len(distance)
    bounds = chunk_bounds(n_points, check_nprocs(n_procs))

    def _assign_chunk(bound):
        start, stop = bound
        indices = np.arange(start, stop)

        labels = np.full(len(indices), -1, dtype=int)
        first = np.full(len(indices), np.inf)
        second = np.full(len(indices), np.inf)

        for slot, medoid in enumerate(medoids):
            d = distance.to(medoid, indices)

            closer = d < first
            runner_up = ~closer & (d < second)

            second[closer] = first[closer]
            first[closer] = d[closer]
            labels[closer] = slot

            second[runner_up] = d[runner_up]

        return labels, first, second

    chunks = parallel_map(_assign_chunk, bounds, n_procs)

    if not chunks:
        return Assignment(labels=np.zeros(0, dtype=int), first=np.zeros(0),
                          second=np.zeros(0), total_deviation=0.0)

    labels, first, second = (np.concatenate(part) for part in zip(*chunks))

    return Assignment(labels=labels, first=first, second=second,
                      total_deviation=float(np.sum(first)))


def clusters_from_labels(labels, n_clusters):
    """Group observation indices by label.

    Returns
    -------
    clusters : list of list of int
        clusters[c] holds, in ascending order, the indices of every
        observation whose label is c.
    """

    labels = np.asarray(labels)
    return [np.flatnonzero(labels == c).tolist() for c in range(n_clusters)]
