"""
Training session analysis framework.

Pure, deterministic calculators that turn a windowed snapshot of logged training
sessions into correlations, insights, recommendations, body part usage, streaks
and trends.
"""
