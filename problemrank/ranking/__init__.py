"""Clustering, RPN scoring and ranking of problem reports."""
