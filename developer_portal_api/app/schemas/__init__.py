"""
Pydantic schema definitions for API payloads.

Each domain (callers and API management users, services) defines its
own Pydantic models for request bodies and remote records.
"""
