import math
import numpy as np

FLOAT_DTYPE = np.float64
INT_DTYPE = np.int64

# Boundary conditions
BC_NONE       :INT_DTYPE = 0
BC_VACUUM     :INT_DTYPE = 1
BC_REFLECTIVE :INT_DTYPE = 2

# Ray trace termination
TRACE_BUDGET    :INT_DTYPE = 0 # Travel distance exhausted
TRACE_VACUUM    :INT_DTYPE = 1 # Exited through a vacuum edge
TRACE_TRUNCATED :INT_DTYPE = 2 # Intersection cap reached

# Misc.
INF       :FLOAT_DTYPE = 1E10
PI        :FLOAT_DTYPE = math.acos(-1.0)
FOUR_PI   :FLOAT_DTYPE = 4.0 * PI
INV_4PI   :FLOAT_DTYPE = 1.0 / FOUR_PI
EPSILON_DIRECTION     :FLOAT_DTYPE = 1E-12 # Direction component treated as zero
COINCIDENCE_TOLERANCE :FLOAT_DTYPE = 1E-12 # Relative tolerance for corner crossing

# Console
MISS_RATE_WARNING :FLOAT_DTYPE = 0.01 # Percent of missed rays flagged in red
