"""Domain layer - records and contracts shared across the front end.

This layer contains:
- Domain entities mirrored from backend payloads
- Storage interfaces
- Exceptions raised by the API client and services
"""
