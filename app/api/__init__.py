# app/api/__init__.py
"""HTTP and WebSocket entry points."""
