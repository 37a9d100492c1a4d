"""
HTTP layer for the messaging feature.
"""
