"""
Route Package

This package contains FastAPI route handlers for the application.
Each module defines routes for a specific feature area:

- auth.py: Signup, email verification, login and logout
- feed.py: The chirp feed (post, infinite scroll)
- profile.py: Profile pages and profile editing

Routers are registered in main.py.
"""
