"""
Tasks app - the task lifecycle.

Validation and sanitization, status vocabulary translation, the MongoDB
task store, and the service that couples writes to best-effort events.
Exposed over REST (django-ninja) and GraphQL (strawberry).
"""
