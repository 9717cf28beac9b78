"""
Weight Lifting Exercise Classification Pipeline

Downloads the WLE wearable-sensor recordings, drops bookkeeping and sparse
aggregate columns, explores one sensor variable, and fits a decision tree and
a random forest under 5-fold cross-validation to predict how an exercise was
performed (classe A-E).
"""

__version__ = "0.1.0"
