"""
Services Module

Business logic behind the REST routers:
- Users: registration, activation, login/logout, profile and password reset
- Hoaxes: posting, paginated listing and deletion
- Tokens: session token issuance, sliding expiry and the periodic sweep
- Mail and profile image storage
"""
