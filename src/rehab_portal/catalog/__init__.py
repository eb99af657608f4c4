"""Exercise catalog.

Known exercise ids and their display labels.
"""
