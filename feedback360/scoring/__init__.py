"""
scoring/ — Competency Aggregation and Confidence Engine

Modules:
    utils.py                   - Statistics primitives (quartiles, mean, variance, z-score, mode)
    relationship.py            - Relationship normalizer and weight tables
    outlier_detector.py        - Outlier detection and down-weighting
    confidence_calculator.py   - Evidence / consistency / coverage confidence
    competency_aggregator.py   - Per-competency weighted composite
    rollup.py                  - Senior / peer / junior → aggregate rollup
    team_aggregator.py         - Team-level pooling of stored insights
"""
