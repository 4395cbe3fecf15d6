"""
Minimal networked key-value store.

A single in-memory mapping from string keys to values, served over HTTP:

- GET /        lists every key
- GET /{key}   returns the stored value as JSON
- PUT /{key}   stores the body (a JSON object, or the body as text)
- DELETE /{key} removes the key
"""

__version__ = "1.0.0"
