"""
Core functionality for the processing-time predictor.

This package contains the statistics aggregator, the tiered rate
predictor and the display formatting helpers.
"""
