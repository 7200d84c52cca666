"""Distance providers: how "the distance between observation i and
observation j" is looked up for a run.

The provider is chosen once, from the data kind, before clustering
starts. Point data goes through a metric; precomputed distance matrices
are read directly.
"""

import enum
import logging

import numpy as np

from sklearn.utils import check_array

from ..exception import ImproperlyConfigured, InvalidInputKind, DataInvalid

from .util import get_distance_method

logger = logging.getLogger(__name__)


class DataKind(enum.Enum):
    POINTS = 'points'
    DISTANCE_MATRIX = 'distance_matrix'

    @classmethod
    def coerce(cls, kind):
        """Turn a DataKind or its string value into a DataKind."""

        if isinstance(kind, cls):
            return kind

        try:
            return cls(kind)
        except (ValueError, TypeError):
            raise InvalidInputKind(
                "Unknown data kind %r; expected one of %s." %
                (kind, [k.value for k in cls])) from None


class PointDistance:
    """Distances computed by applying a metric to pairs of observations.

    Parameters
    ----------
    points : array-like, shape=(n_points, n_features)
        The observations. Named metrics require a numeric 2D array;
        callable metrics accept any indexable, sized collection.
    metric : str, Metric or callable
        Anything accepted by `get_distance_method`.
    """

    kind = DataKind.POINTS

    def __init__(self, points, metric):
        if metric is None:
            raise ImproperlyConfigured(
                "A metric is required to cluster point data.")

        self.metric = get_distance_method(metric)

        if self.metric.vectorized:
            self.points = check_array(points, dtype=float)
        else:
            self.points = points

    def __len__(self):
        return len(self.points)

    def __call__(self, i, j):
        return self.metric(self.points[i], self.points[j])

    def to(self, j, indices=None):
        """Distances from observations `indices` (default: all) to
        observation `j`."""

        if indices is None:
            X = self.points
        elif isinstance(self.points, np.ndarray):
            X = self.points[indices]
        else:
            X = [self.points[i] for i in indices]

        return self.metric.one_to_many(X, self.points[j])


class MatrixDistance:
    """Distances read from a square matrix of precomputed distances.

    Parameters
    ----------
    matrix : array-like, shape=(n_points, n_points)
        matrix[i, j] is the distance between observations i and j.
    """

    kind = DataKind.DISTANCE_MATRIX

    def __init__(self, matrix):
        matrix = check_array(matrix, dtype=float)

        if matrix.shape[0] != matrix.shape[1]:
            raise DataInvalid(
                "Distance matrix must be square, got shape %s." %
                (matrix.shape,))

        self.matrix = matrix

    def __len__(self):
        return self.matrix.shape[0]

    def __call__(self, i, j):
        return float(self.matrix[i, j])

    def to(self, j, indices=None):
        if indices is None:
            return self.matrix[:, j]
        return self.matrix[indices, j]


def distance_calculator(data, kind, metric=None):
    """Build the distance provider for `data` of the given kind.

    Raises
    ------
    InvalidInputKind
        If `kind` is neither points nor a distance matrix.
    """

    kind = DataKind.coerce(kind)

    if kind is DataKind.POINTS:
        return PointDistance(data, metric)

    if metric is not None:
        logger.debug("Ignoring metric %s for distance matrix input.", metric)

    return MatrixDistance(data)
