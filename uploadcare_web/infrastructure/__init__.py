"""
Infrastructure layer - external service integrations.

Each subdirectory wraps an external dependency:
- uploadcare: REST API group client
- cache: group info cache
- jobs: background store job

These wrappers translate between external formats and our domain models.
"""
