"""
CV Profile Extractor Backend Application.

A FastAPI service that turns an uploaded CV (image, PDF, text or DOCX)
into a structured candidate profile using AI (OpenAI).
"""

__version__ = "1.0.0"
