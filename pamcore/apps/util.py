import os
import json
import argparse

import numpy as np

from ..exception import DataInvalid


class readable_dir(argparse.Action):
    """Argparse action that determines if the option given points to a
    file in a directory that exists and is writable.
    """
    def __call__(self, parser, namespace, values, option_string=None):
        prospective_dir = os.path.dirname(os.path.abspath(values))
        if not os.path.isdir(prospective_dir):
            raise argparse.ArgumentTypeError(
                "readable_dir:{0} is not a valid path".format(prospective_dir))
        if os.access(prospective_dir, os.W_OK):
            setattr(namespace, self.dest, values)
        else:
            raise argparse.ArgumentTypeError(
                "readable_dir:{0} is not a writable dir".format(
                    prospective_dir))


def load_array(path):
    """Load a numeric array from `path`: .npy files with np.load,
    anything else as whitespace- or comma-delimited text.
    """

    if os.path.splitext(path)[1] == '.npy':
        return np.load(path)

    with open(path) as f:
        first = f.readline()
    delimiter = ',' if ',' in first else None

    try:
        return np.loadtxt(path, delimiter=delimiter, ndmin=2)
    except ValueError as e:
        raise DataInvalid(
            "Couldn't parse %s as a numeric table: %s" % (path, e)) from e


def parse_medoids(values):
    """Turn --initial-medoids arguments into a list of ints. A single
    value naming an existing file is loaded with `load_array`.
    """

    if len(values) == 1 and os.path.isfile(values[0]):
        return [int(i) for i in np.ravel(load_array(values[0]))]

    try:
        return [int(v) for v in values]
    except ValueError:
        raise DataInvalid(
            "Initial medoids must be integer indices or a path to a file "
            "of indices, got %s." % (values,)) from None


def write_clusters(path, clusters):
    with open(path, 'w') as f:
        json.dump([list(c) for c in clusters], f)
