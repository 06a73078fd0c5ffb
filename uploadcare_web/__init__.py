"""
Uploadcare web integration.

Renders Uploadcare File Uploader Web Components into forms and turns
the values they submit into file-group objects:
- core: group parsing, resolution and model field mounting
- views: HTML/JS snippets for the uploader
- infrastructure: Uploadcare REST client, cache, background store job
- api: FastAPI routes and dependencies
- config: application configuration
"""

__version__ = "0.1.0"
