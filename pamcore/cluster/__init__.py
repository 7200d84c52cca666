"""Library code for clustering tasks: k-medoids (PAM) refinement over
point data or precomputed distance matrices.
"""

from . import distance
from . import kmedoids
from . import util

from .distance import DataKind
from .kmedoids import KMedoids
from .util import ClusterResult
