"""
Core services — generation, validation and probing on top of the registry.
"""
