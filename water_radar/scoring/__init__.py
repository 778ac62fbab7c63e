"""
Scoring engine: classification, 0–100 suitability score, and ranking.

Modules
-------
classifier : classify(), group/TDS/sodium → Category.  Pure.
scorer     : ScoreResult dataclass + score_water() + metric_status()
             + describe_reasons().  No I/O.
ranker     : ranking_key() + compare_waters() + rank_waters()
             + pick_winner() + build_rotation_plan().
"""
