"""
Routes package for the task-list service.

This package contains route blueprints:
- auth: health check, signup, login and logout
- tasks: authenticated, ownership-scoped task endpoints
"""
