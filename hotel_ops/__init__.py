"""Hotel operational event bus and notification automation service.

The package intentionally re-exports nothing; the presence of this file is
sufficient for Python to treat ``hotel_ops`` as a regular package.
"""
