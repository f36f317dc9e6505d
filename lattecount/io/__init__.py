"""
lattecount/io/__init__.py

Data containers for polytope specifications.
"""
