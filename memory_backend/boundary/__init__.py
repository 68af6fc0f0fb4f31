"""
Boundary layer: record store implementations and their selection.
"""
