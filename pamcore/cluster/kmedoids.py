import time
import numbers
import logging
import warnings
from collections import namedtuple

import numpy as np

from sklearn.base import BaseEstimator, ClusterMixin

from .. import exception
from ..exception import ImproperlyConfigured, InvalidMedoidSet

from ..util.log import timed
from ..util.parallel import check_nprocs, parallel_map

from . import util
from .distance import DataKind, distance_calculator

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 0.0001
DEFAULT_ITERMAX = 100


Swap = namedtuple('Swap', ['cluster', 'candidate', 'cost'])


class KMedoids(BaseEstimator, ClusterMixin):
    """SKlearn-style object for k-medoids (PAM) clustering.

    K-Medoids is a clustering algorithm similar to the k-means algorithm
    but the center of each cluster is required to actually be an
    observation in the input data. This implementation refines a
    user-supplied set of initial medoids by repeatedly applying the
    single medoid swap that most reduces total deviation.

    Parameters
    ----------
    metric : str, Metric or callable, default='euclidean'
        Distance metric used while comparing data points. Ignored when
        `data_kind` is 'distance_matrix'.
    initial_medoids : array-like of int, default=None
        Indices of the observations to start from. Can also be given to
        `fit`.
    data_kind : {'points', 'distance_matrix'}, default='points'
        Whether `X` holds observations or precomputed distances.
    tolerance : float, default=0.0001
        Stop once an iteration lowers total deviation by this much or
        less.
    max_iterations : int, default=100
        Maximum number of swap iterations. Zero skips clustering.
    n_procs : int, default=None
        Number of worker threads. Defaults to `auto_nprocs()`.
    """

    def __init__(
            self, metric='euclidean', initial_medoids=None,
            data_kind='points', tolerance=DEFAULT_TOLERANCE,
            max_iterations=DEFAULT_ITERMAX, n_procs=None):

        self.metric = metric
        self.initial_medoids = initial_medoids
        self.data_kind = data_kind
        self.tolerance = tolerance
        self.max_iterations = max_iterations
        self.n_procs = n_procs

    def fit(self, X, y=None, initial_medoids=None):
        """Run k-medoids on X, starting from `initial_medoids` (or
        the medoids given at construction).

        Parameters
        ----------
        X : array-like, shape=(n_observations, n_features) or
            shape=(n_observations, n_observations)
            Observations, or a distance matrix when `data_kind` is
            'distance_matrix'.
        y : ignored
        initial_medoids : array-like of int, default=None
            Overrides the initial medoids given at construction.
        """

        if initial_medoids is None:
            initial_medoids = self.initial_medoids
        if initial_medoids is None:
            raise ImproperlyConfigured(
                "KMedoids needs initial medoids, either at construction or "
                "when calling fit.")

        t0 = time.perf_counter()

        self.result_ = kmedoids(
            X,
            initial_medoids=initial_medoids,
            distance_method=self.metric,
            data_kind=self.data_kind,
            tolerance=self.tolerance,
            max_iterations=self.max_iterations,
            n_procs=self.n_procs)

        if DataKind.coerce(self.data_kind) is DataKind.POINTS:
            self.centers_ = [X[i] for i in self.result_.medoids]
        else:
            self.centers_ = None

        self.runtime_ = time.perf_counter() - t0
        return self

    def predict(self, X):
        """Assign new observations to the nearest fitted medoid.

        Parameters
        ----------
        X : array-like, shape=(n_observations, n_features)
            New data to predict.

        Returns
        -------
        labels : ndarray, shape=(n_observations,)
            Index (into `medoid_indices_`) of the nearest medoid. Ties
            go to the earliest medoid.
        """

        if not hasattr(self, 'result_'):
            raise ImproperlyConfigured(
                "To predict the clustering result for new data, the "
                "clusterer first must have fit some data.")
        if self.centers_ is None:
            raise ImproperlyConfigured(
                "Prediction is only possible for clusterers fit on points, "
                "not on a distance matrix.")

        metric = util.get_distance_method(self.metric)
        if metric.vectorized:
            X = np.asarray(X, dtype=float)

        dists = np.array([metric.one_to_many(X, c) for c in self.centers_])
        return np.argmin(dists, axis=0)

    @property
    def labels_(self):
        return self.result_.assignments

    @property
    def medoid_indices_(self):
        return np.array(self.result_.medoids, dtype=int)

    @property
    def clusters_(self):
        return self.result_.clusters

    @property
    def total_deviation_(self):
        return self.result_.total_deviation

    @property
    def n_iter_(self):
        return self.result_.iterations


def kmedoids(X, initial_medoids, distance_method=None,
             data_kind=DataKind.POINTS, tolerance=DEFAULT_TOLERANCE,
             max_iterations=DEFAULT_ITERMAX, n_procs=None):
    """K-Medoids clustering by Partitioning Around Medoids (PAM).

    Starting from `initial_medoids`, each iteration estimates, for every
    cluster and every non-medoid observation, how much total deviation
    would change if that observation replaced the cluster's medoid. The
    single best swap is applied and all observations are reassigned.
    Iteration stops when the improvement is at most `tolerance`, when no
    swap candidate remains, or after `max_iterations`. Clusters left
    empty at the end are dropped along with their medoids, so the result
    may have fewer medoids than were given.

    This is a local search; the result depends on the initial medoids
    and is not guaranteed to be globally optimal.

    Parameters
    ----------
    X : array-like
        Observations, shape=(n_observations, n_features), or a distance
        matrix, shape=(n_observations, n_observations).
    initial_medoids : array-like of int
        Distinct indices of the observations to start from.
    distance_method : str, Metric or callable, default=None
        Metric between two observations. Required for point data.
    data_kind : DataKind or {'points', 'distance_matrix'}
        What `X` holds.
    tolerance : float, default=0.0001
        Minimum improvement in total deviation to keep iterating.
    max_iterations : int, default=100
        Maximum number of swap iterations. Zero returns immediately with
        no clusters.
    n_procs : int, default=None
        Number of worker threads. Defaults to `auto_nprocs()`.

    Returns
    -------
    result : ClusterResult
        Medoids, clusters, total deviation, iterations performed, and
        per-observation assignments and distances.
    """

    distance = distance_calculator(X, data_kind, distance_method)

    _check_configuration(tolerance, max_iterations)
    n_procs = check_nprocs(n_procs)

    n_points = len(distance)
    medoids = _check_medoids(initial_medoids, n_points)

    if max_iterations == 0:
        logger.info("max_iterations is 0; returning initial medoids "
                    "unclustered.")
        return util.ClusterResult(
            medoids=tuple(medoids),
            clusters=(),
            total_deviation=0.0,
            iterations=0,
            assignments=_frozen(np.full(n_points, -1, dtype=int)),
            distances=_frozen(np.full(n_points, np.nan)))

    with timed("Assigned points to initial medoids in %.2f sec.",
               logger.debug):
        assignment = util.assign_to_nearest_medoids(
            distance, medoids, n_procs=n_procs)

    deviation = assignment.total_deviation
    logger.info(
        "Starting k-medoids with %s medoids on %s points (%s); "
        "initial total deviation %.5f.",
        len(medoids), n_points, distance.kind.value, deviation)

    iterations = 0
    improvement = np.inf
    while iterations < max_iterations and improvement > tolerance:
        iterations += 1

        with timed("Evaluated swaps in %.2f sec.", logger.debug):
            swap = _best_swap(distance, medoids, assignment, n_procs=n_procs)

        if swap is None:
            logger.info("No swap candidates remain after %s iterations.",
                        iterations)
            break

        trial_medoids = list(medoids)
        trial_medoids[swap.cluster] = swap.candidate

        with timed("Reassigned points in %.2f sec.", logger.debug):
            trial = util.assign_to_nearest_medoids(
                distance, trial_medoids, n_procs=n_procs)

        improvement = deviation - trial.total_deviation

        if improvement < 0:
            logger.debug(
                "Rejected swap for k=%s (%s -> %s): total deviation "
                "%.5f -> %.5f.", swap.cluster, medoids[swap.cluster],
                swap.candidate, deviation, trial.total_deviation)
            break

        logger.debug(
            "Accepted swap for k=%s (%s -> %s, estimated cost %.5f): total "
            "deviation %.5f -> %.5f.", swap.cluster, medoids[swap.cluster],
            swap.candidate, swap.cost, deviation, trial.total_deviation)

        medoids, assignment = trial_medoids, trial
        deviation = trial.total_deviation
    else:
        if improvement > tolerance:
            warnings.warn(
                "k-medoids stopped after max_iterations=%s while total "
                "deviation was still improving by %.5g." %
                (max_iterations, improvement),
                exception.ConvergenceWarning)

    result = _compact(medoids, assignment, iterations)

    logger.info(
        "k-medoids finished after %s iterations with %s clusters; total "
        "deviation %.7f.", result.iterations, len(result.medoids),
        result.total_deviation)

    return result


def _swap_cost(distance, candidate, cluster, assignment):
    """Estimate the change in total deviation if `candidate` replaced
    the medoid of `cluster`.

    Members of `cluster` move to the candidate or to their second-best
    medoid, whichever is closer; everyone else moves to the candidate
    only if it is closer than their current medoid. The true
    second-best medoid after the swap is not recomputed, so this is an
    estimate rather than the exact change.
    """

    labels, first, second = \
        assignment.labels, assignment.first, assignment.second

    d = distance.to(candidate)

    delta = np.where(
        labels == cluster,
        np.minimum(d, second) - first,
        np.where(d < first, d - first, 0.0))
    delta[candidate] = 0.0

    return float(np.sum(delta) - first[candidate])


def _best_swap(distance, medoids, assignment, n_procs=None):
    """Find the (cluster, candidate) swap with the lowest estimated cost.

    Each cluster is scanned by its own worker, which returns its best
    candidate; clusters are then compared in order. Both scans need a
    strictly lower cost to change their choice, so the earliest cluster
    and candidate win ties.

    Returns
    -------
    swap : Swap or None
        The best swap, or None if no observation can be swapped in
        (every non-medoid sits at distance zero from its medoid).
    """

    is_medoid = np.zeros(len(distance), dtype=bool)
    is_medoid[medoids] = True

    candidates = np.flatnonzero(~is_medoid & (assignment.first > 0))
    if len(candidates) == 0:
        return None

    def _best_for_cluster(cluster):
        best_cost, best_candidate = np.inf, None
        for candidate in candidates:
            cost = _swap_cost(distance, candidate, cluster, assignment)
            if cost < best_cost:
                best_cost, best_candidate = cost, int(candidate)
        return best_cost, best_candidate

    per_cluster = parallel_map(
        _best_for_cluster, range(len(medoids)), n_procs=n_procs)

    best = None
    for cluster, (cost, candidate) in enumerate(per_cluster):
        if candidate is None:
            continue
        if best is None or cost < best.cost:
            best = Swap(cluster=cluster, candidate=candidate, cost=cost)

    return best


def _compact(medoids, assignment, iterations):
    """Drop empty clusters (and their medoids) and freeze the run's
    working state into a ClusterResult.
    """

    clusters = util.clusters_from_labels(assignment.labels, len(medoids))
    keep = [slot for slot, members in enumerate(clusters) if members]

    if len(keep) < len(medoids):
        logger.info(
            "Dropping %s empty clusters (medoids %s).",
            len(medoids) - len(keep),
            [m for slot, m in enumerate(medoids) if slot not in keep])

    new_slot = np.full(len(medoids), -1, dtype=int)
    new_slot[keep] = np.arange(len(keep))

    return util.ClusterResult(
        medoids=tuple(medoids[slot] for slot in keep),
        clusters=tuple(tuple(clusters[slot]) for slot in keep),
        total_deviation=assignment.total_deviation,
        iterations=iterations,
        assignments=_frozen(new_slot[assignment.labels]),
        distances=_frozen(assignment.first.copy()))


def _frozen(arr):
    arr.setflags(write=False)
    return arr


def _check_configuration(tolerance, max_iterations):
    if (isinstance(tolerance, bool) or
            not isinstance(tolerance, numbers.Real) or
            not tolerance >= 0):
        raise ImproperlyConfigured(
            "tolerance must be a non-negative number, got %r." % (tolerance,))

    if (isinstance(max_iterations, bool) or
            not isinstance(max_iterations, numbers.Integral) or
            max_iterations < 0):
        raise ImproperlyConfigured(
            "max_iterations must be a non-negative integer, got %r." %
            (max_iterations,))


def _check_medoids(initial_medoids, n_points):
    """Validate initial medoids against a dataset of `n_points`
    observations, returning them as a list of ints.
    """

    medoids = np.asarray(initial_medoids)

    if medoids.ndim != 1 or len(medoids) == 0:
        raise InvalidMedoidSet(
            "Initial medoids must be a non-empty sequence of indices, got "
            "%r." % (initial_medoids,))
    if not np.issubdtype(medoids.dtype, np.integer):
        raise InvalidMedoidSet(
            "Initial medoids must be integer indices, got dtype %s." %
            medoids.dtype)

    out_of_range = medoids[(medoids < 0) | (medoids >= n_points)]
    if len(out_of_range) > 0:
        raise InvalidMedoidSet(
            "Initial medoids %s are out of range for %s observations." %
            (out_of_range.tolist(), n_points))

    values, counts = np.unique(medoids, return_counts=True)
    if np.any(counts > 1):
        raise InvalidMedoidSet(
            "Initial medoids must be distinct; %s appear more than once." %
            values[counts > 1].tolist())

    return [int(m) for m in medoids]
