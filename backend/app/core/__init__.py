# app/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- db: Database configuration and connection management
- exceptions: Error taxonomy and the JSON error body handlers
- principal: Who a request is acting as (anonymous, bearer token, Basic credentials)
- security: Password hashing, random tokens and Basic credential decoding
"""
