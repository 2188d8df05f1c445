"""
Body part catalog and usage modules.

This package contains the seed body part catalog and session type mappings that are
copied into a user's configuration at setup, and the aggregator that turns logged
sessions into a per-body-part usage heatmap.
"""
