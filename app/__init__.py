"""
Job Board AI Assistant
AI-assisted content generation for a job board backend.

Architecture:
- FastAPI: HTTP surface (/api/ai/...)
- Text-generation backend: OpenAI-compatible API (Ollama by default)
- AI output is never trusted: it is extracted, reconciled and validated
"""

__version__ = "1.0.0"
