"""
API package containing versioned routes.

A version subpackage exposes a top‑level ``router`` which includes
all of its endpoints.  ``responses`` turns service outcomes into HTTP
responses and ``deps`` provides the shared FastAPI dependencies.
"""
