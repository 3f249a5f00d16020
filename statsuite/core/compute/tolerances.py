"""
Numerical thresholds shared across statsuite.

Every magic number used by an algorithm lives here so that the policy is
visible in one place:
- singularity detection for the Gauss-Jordan kernel
- the size limits under which exact Mann-Whitney p-values are enumerated
- truncation of the Kolmogorov-Smirnov limiting series
- rounding snaps for cumulative percents and perfect regression fits
"""

# Gauss-Jordan: a pivot below SINGULAR_PIVOT_TOL * max(1, max|A|)
# marks the matrix singular.
SINGULAR_PIVOT_TOL = 1e-10

# Exact Mann-Whitney enumeration runs only while n1*n2 < EXACT_MAX_PRODUCT
# and n1*n2/2 + min(n1, n2) <= EXACT_MAX_SPAN.
EXACT_MAX_PRODUCT = 400
EXACT_MAX_SPAN = 220

# Kolmogorov-Smirnov limiting series.
KS_SERIES_TOL = 1e-6
KS_SERIES_MAX_TERMS = 100
# Below this Z the alternating series converges too slowly to trust;
# the true p is 1 to twelve digits there.
KS_SMALL_STATISTIC = 0.2

# Final cumulative percent at or above this value is reported as exactly 100.
CUMULATIVE_SNAP_THRESHOLD = 99.0

# SSE at or below PERFECT_FIT_RTOL * SST is rounding residue of an exact fit.
PERFECT_FIT_RTOL = 1e-20
