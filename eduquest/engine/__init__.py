"""
Pure evaluation engine: grading, adaptive selection, assembly, scoring,
progress and reward eligibility. Nothing here touches the database.
"""
