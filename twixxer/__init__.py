"""
Twixxer Application Package

This package contains the Twixxer short-post social site. The package is
organized as follows:

- config.py: Application configuration and environment settings
- database.py: Database connection and session management
- dependencies.py: FastAPI dependency injection functions (login gating)
- exceptions.py: Application exceptions handled in main.py
- forms.py: Pydantic models validating submitted forms
- limiter.py: Rate limiting configuration
- main.py: FastAPI application entry point
- models.py: SQLAlchemy ORM database models
- templating.py: Jinja2 template configuration

Subpackages:
- routes/: Route handlers (auth, feed, profile)
- services/: Business logic (sessions, passwords, email, profiles, chirps, pagination)
- utils/: Utility functions (display helpers, validators)
- templates/: HTML templates for server-side rendering
- static/: Static assets (CSS)
"""
