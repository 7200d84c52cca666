"""pamcore: partitioning around medoids for point data and precomputed
distance matrices.
"""

__version__ = '0.1.0'

from . import exception
from .cluster import KMedoids, DataKind, ClusterResult
