"""The kmedoids app refines an initial set of medoids over a dataset of
points (or a precomputed distance matrix) and writes the resulting
medoids, per-point assignments, and cluster membership lists.
"""

import sys
import os
import argparse
import logging

import numpy as np

from pamcore.apps.util import (readable_dir, load_array, parse_medoids,
                               write_clusters)
from pamcore.cluster import KMedoids
from pamcore.cluster.kmedoids import DEFAULT_TOLERANCE, DEFAULT_ITERMAX
from pamcore.cluster.util import NAMED_METRICS
from pamcore.util.log import timed, configure_logging
from pamcore import exception

logger = logging.getLogger(__name__)


def process_command_line(argv):

    parser = argparse.ArgumentParser(
        prog='kmedoids',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        description="Cluster a dataset with k-medoids (PAM), starting "
                    "from a given set of medoids.")

    # INPUTS
    input_args = parser.add_argument_group("Input Settings")
    input_data_group = input_args.add_mutually_exclusive_group(required=True)
    input_data_group.add_argument(
        "--points",
        help="File of observations, one per row (.npy or delimited text).")
    input_data_group.add_argument(
        "--distance-matrix",
        help="File holding a square matrix of precomputed distances "
             "(.npy or delimited text).")
    input_args.add_argument(
        "--initial-medoids", nargs='+', required=True,
        help="Indices of the observations to start from, or the path to "
             "a file listing them.")

    # PARAMETERS
    cluster_args = parser.add_argument_group("Clustering Settings")
    cluster_args.add_argument(
        "--metric", default=None, choices=sorted(NAMED_METRICS),
        help="The metric for measuring distances between points. Defaults "
             "to euclidean for --points; not used with --distance-matrix.")
    cluster_args.add_argument(
        "--tolerance", default=DEFAULT_TOLERANCE, type=float,
        help="Stop once an iteration improves total deviation by no more "
             "than this.")
    cluster_args.add_argument(
        "--max-iterations", default=DEFAULT_ITERMAX, type=int,
        help="The maximum number of swap iterations to perform.")
    cluster_args.add_argument(
        "--n-procs", default=None, type=int,
        help="Number of worker threads. Defaults to OMP_NUM_THREADS or "
             "the number of CPUs.")

    # OUTPUT
    output_args = parser.add_argument_group("Output Settings")
    output_args.add_argument(
        "--medoids", required=True, action=readable_dir,
        help="The location to write final medoid indices (npy).")
    output_args.add_argument(
        "--assignments", required=True, action=readable_dir,
        help="The location to write the cluster of each observation (npy).")
    output_args.add_argument(
        "--clusters", default=None, action=readable_dir,
        help="The location to write cluster membership lists (json).")

    args = parser.parse_args(argv[1:])

    if args.distance_matrix:
        if args.metric is not None:
            raise exception.ImproperlyConfigured(
                "--metric has no effect with --distance-matrix; distances "
                "are already computed.")
        args.data_kind = 'distance_matrix'
        args.data = args.distance_matrix
    else:
        args.data_kind = 'points'
        args.data = args.points
        if args.metric is None:
            args.metric = 'euclidean'

    for path in [args.medoids, args.assignments]:
        if os.path.splitext(path)[1] != '.npy':
            logger.warning(
                "You provided an output file (%s) that looks like it's not "
                "an npy, but this is how it will be saved (np.save will add "
                "the extension).", os.path.basename(path))

    return args


def main(argv=None):

    if argv is None:
        argv = sys.argv

    configure_logging()

    args = process_command_line(argv)

    with timed("Loaded data in %.2f sec.", logger.info):
        data = load_array(args.data)
    initial_medoids = parse_medoids(args.initial_medoids)

    clustering = KMedoids(
        metric=args.metric,
        initial_medoids=initial_medoids,
        data_kind=args.data_kind,
        tolerance=args.tolerance,
        max_iterations=args.max_iterations,
        n_procs=args.n_procs)

    clustering.fit(data)

    logger.info(
        "Clustered %s observations into %s clusters in %.2f seconds.",
        len(data), len(clustering.medoid_indices_), clustering.runtime_)

    np.save(args.medoids, clustering.medoid_indices_)
    np.save(args.assignments, clustering.labels_)
    if args.clusters:
        write_clusters(args.clusters, clustering.clusters_)

    logger.info("Success! Data can be found in %s.",
                os.path.dirname(os.path.abspath(args.assignments)))

    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
