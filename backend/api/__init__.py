"""HTTP surface of the llms.txt generator.

``backend.api.app`` holds the application factory and the module-level
instance that ``llmstxt serve`` runs under uvicorn.
"""

from backend.api.app import app

__all__ = ["app"]
