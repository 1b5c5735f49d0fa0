"""
Live Cricket Scoring Engine

Ball-by-ball scoring of a single limited-overs match: runs, extras,
wickets, retirements and innings transitions applied to one shared
match state, with exact single-step undo.
"""

__version__ = "0.1.0"
