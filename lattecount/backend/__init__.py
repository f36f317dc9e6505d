"""
lattecount/backend/__init__.py

Broadcast imports for the backend.
"""

from ..exceptions import ExternalToolFailure

backend = None
"""
Global repository for the active backend.
"""
