"""
Default tuning constants.

Every engine reads these as keyword defaults, so a single run can override
any of them through its constructor.
"""

import torch

# Maximum number of fuzzy c-means iterations if the weights do not settle first
FCM_MAX_ITERATIONS = 20

# Squared change between successive fuzzy weight matrices deemed converged
FCM_THRESHOLD = 1.0e-19

# Distances at or below this are treated as an entity sitting on a centroid
COINCIDENCE_THRESHOLD = 1.0e-19

# Random restarts tried for each candidate number of clusters
ATTEMPTS_PER_CLUSTERS_NUMBER = 3

# Re-runs of one restart while its quality index comes out NaN (empty clusters)
MAX_ITERATIONS_PER_CLUSTERS_NUMBER = 5

# Scale of the push applied to centroids of one-entity clusters
OFFSET_CONSTANT = 0.05

# Cap on Lloyd iterations; reaching it is reported as non-convergence
KMEANS_MAX_ITERATIONS = 300

DEFAULT_DTYPE = torch.float64
