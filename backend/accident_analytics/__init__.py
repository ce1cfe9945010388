"""
UK accident analytics backend.

Loads the cleaned accident table and the 2005-2015 supplemental table,
reconciles missing severities and computes the dashboard series: hot
spots, trends, descriptive statistics and correlations.
"""

__version__ = "0.1.0"
