import numpy as np
import pytest

from numpy.testing import assert_allclose

from .distance import (DataKind, PointDistance, MatrixDistance,
                       distance_calculator)
from .util import distance_matrix

from ..exception import ImproperlyConfigured, InvalidInputKind, DataInvalid
from ..test.cluster_data import SIMPLE_01


def test_data_kind_coerce():
    assert DataKind.coerce('points') is DataKind.POINTS
    assert DataKind.coerce('distance_matrix') is DataKind.DISTANCE_MATRIX
    assert DataKind.coerce(DataKind.POINTS) is DataKind.POINTS

    for bad in ['POINTS', 'matrix', 1, None, ['points']]:
        with pytest.raises(InvalidInputKind):
            DataKind.coerce(bad)


def test_calculator_selection():
    points = distance_calculator(SIMPLE_01, 'points', 'euclidean')
    assert isinstance(points, PointDistance)
    assert points.kind is DataKind.POINTS

    matrix = distance_calculator(
        distance_matrix(SIMPLE_01, 'euclidean'), DataKind.DISTANCE_MATRIX)
    assert isinstance(matrix, MatrixDistance)
    assert matrix.kind is DataKind.DISTANCE_MATRIX

    with pytest.raises(InvalidInputKind):
        distance_calculator(SIMPLE_01, 'graph', 'euclidean')


def test_point_and_matrix_distances_agree():
    points = distance_calculator(SIMPLE_01, 'points', 'manhattan')
    matrix = distance_calculator(
        distance_matrix(SIMPLE_01, 'manhattan'), 'distance_matrix')

    assert len(points) == len(matrix) == 10

    for i, j in [(0, 0), (0, 9), (3, 7), (9, 2)]:
        assert_allclose(points(i, j), matrix(i, j))

    assert_allclose(points.to(4), matrix.to(4))
    assert_allclose(points.to(4, [1, 8]), matrix.to(4, [1, 8]))


def test_matrix_lookup_is_not_symmetrized():
    D = np.array([[0.0, 1.0],
                  [2.0, 0.0]])
    matrix = MatrixDistance(D)

    assert matrix(0, 1) == 1.0
    assert matrix(1, 0) == 2.0
    assert_allclose(matrix.to(0), [0.0, 2.0])


def test_point_distance_callable_on_lists():
    calls = []

    def metric(a, b):
        calls.append((tuple(a), tuple(b)))
        return abs(a[0] - b[0])

    points = PointDistance([[0], [2], [5]], metric)

    assert points(0, 2) == 5
    assert_allclose(points.to(1), [2, 0, 3])
    assert_allclose(points.to(1, [2]), [3])
    assert len(calls) == 5


def test_point_distance_needs_metric():
    with pytest.raises(ImproperlyConfigured):
        PointDistance(SIMPLE_01, None)


def test_matrix_distance_must_be_square():
    with pytest.raises(DataInvalid):
        MatrixDistance(np.zeros((3, 2)))
