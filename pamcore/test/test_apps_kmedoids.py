import os
import json

import numpy as np
import pytest

from numpy.testing import assert_array_equal

from .. import exception
from ..apps import kmedoids as kmedoids_app
from ..apps import main as main_app
from ..cluster.util import distance_matrix

from .cluster_data import SIMPLE_01, SIMPLE_01_MEDOIDS, SIMPLE_01_CLUSTERS


def runhelper(tmp_path, args, app=kmedoids_app.main, prefix=('',)):

    fnames = {
        'medoids': str(tmp_path / 'medoids.npy'),
        'assignments': str(tmp_path / 'assignments.npy'),
        'clusters': str(tmp_path / 'clusters.json'),
    }

    argv = list(prefix)
    for argname in ['medoids', 'assignments', 'clusters']:
        argv.extend(['--%s' % argname, fnames[argname]])
    argv.extend(args)

    assert app(argv) == 0

    for fname in fnames.values():
        assert os.path.isfile(fname), \
            "Couldn't find %s. Dir contained: %s" % (
                fname, os.listdir(os.path.dirname(fname)))

    medoids = np.load(fnames['medoids'])
    assigns = np.load(fnames['assignments'])
    with open(fnames['clusters']) as f:
        clusters = json.load(f)

    return medoids, assigns, clusters


def check_simple_outputs(medoids, assigns, clusters):
    assert len(medoids) == 2
    assert clusters == SIMPLE_01_CLUSTERS
    assert_array_equal(assigns, [0] * 5 + [1] * 5)
    for medoid, members in zip(medoids, clusters):
        assert medoid in members


def test_kmedoids_points_text(tmp_path):
    points = str(tmp_path / 'points.txt')
    np.savetxt(points, SIMPLE_01)

    outputs = runhelper(tmp_path, [
        '--points', points,
        '--initial-medoids'] + [str(m) for m in SIMPLE_01_MEDOIDS])

    check_simple_outputs(*outputs)


def test_kmedoids_points_csv_metric(tmp_path):
    points = str(tmp_path / 'points.csv')
    np.savetxt(points, SIMPLE_01, delimiter=',')

    outputs = runhelper(tmp_path, [
        '--points', points,
        '--metric', 'chebyshev',
        '--n-procs', '2',
        '--initial-medoids', '0', '9'])

    check_simple_outputs(*outputs)


def test_kmedoids_distance_matrix_npy(tmp_path):
    matrix = str(tmp_path / 'distances.npy')
    np.save(matrix, distance_matrix(SIMPLE_01, 'euclidean'))

    medoid_file = str(tmp_path / 'initial.npy')
    np.save(medoid_file, np.array(SIMPLE_01_MEDOIDS))

    outputs = runhelper(tmp_path, [
        '--distance-matrix', matrix,
        '--initial-medoids', medoid_file])

    check_simple_outputs(*outputs)


def test_kmedoids_zero_iterations(tmp_path):
    points = str(tmp_path / 'points.npy')
    np.save(points, SIMPLE_01)

    medoids, assigns, clusters = runhelper(tmp_path, [
        '--points', points,
        '--max-iterations', '0',
        '--initial-medoids', '3', '8'])

    assert_array_equal(medoids, [3, 8])
    assert_array_equal(assigns, -1)
    assert clusters == []


def test_main_dispatch(tmp_path):
    points = str(tmp_path / 'points.npy')
    np.save(points, SIMPLE_01)

    outputs = runhelper(
        tmp_path,
        ['--points', points, '--initial-medoids', '1', '5'],
        app=main_app.main, prefix=('pamcore', 'kmedoids'))

    check_simple_outputs(*outputs)


def test_metric_with_distance_matrix(tmp_path):
    matrix = str(tmp_path / 'distances.npy')
    np.save(matrix, distance_matrix(SIMPLE_01, 'euclidean'))

    with pytest.raises(exception.ImproperlyConfigured):
        runhelper(tmp_path, [
            '--distance-matrix', matrix,
            '--metric', 'euclidean',
            '--initial-medoids', '1', '5'])


def test_bad_initial_medoids(tmp_path):
    points = str(tmp_path / 'points.npy')
    np.save(points, SIMPLE_01)

    with pytest.raises(exception.InvalidMedoidSet):
        runhelper(tmp_path, [
            '--points', points,
            '--initial-medoids', '1', '1'])

    with pytest.raises(exception.DataInvalid):
        runhelper(tmp_path, [
            '--points', points,
            '--initial-medoids', 'one', 'five'])
