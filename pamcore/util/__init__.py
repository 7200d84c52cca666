"""General purpose utilities for logging and parallel execution.
"""

from .log import timed
from .parallel import auto_nprocs, parallel_map
