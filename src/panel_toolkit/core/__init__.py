"""
Core package: immutable data models and schema validation shared by
the catalog, geometry and compositor subpackages.
"""
