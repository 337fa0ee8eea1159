import numpy as np

"""
The Experience tables are dense numpy arrays indexed by integers
(states and actions are opaque indices 0..S-1 and 0..A-1).

VisitTable (shape S x A x S, unsigned ints) counts the transitions
(s, a) -> s1. VisitSumTable (shape S x A) is its marginal over the
next state axis.

RewardTable (shape S x A x S, floats) holds the cumulative reward of
each transition and RewardSumTable (shape S x A) its marginal.

Table3D / Table2D are the float tables in general, and VISIT_DTYPE /
REWARD_DTYPE the element types the Experience allocates.
"""

VISIT_DTYPE = np.uint64
REWARD_DTYPE = np.float64

Table2D = np.ndarray
Table3D = np.ndarray

VisitTable = np.ndarray
VisitSumTable = np.ndarray
RewardTable = Table3D
RewardSumTable = Table2D
