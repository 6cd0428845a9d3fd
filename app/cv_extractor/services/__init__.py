"""
Services package for the CV extraction application.

Contains:
- file_classifier: upload acceptance and routing
- payload_service: file to model payload encoding
- ai: OpenAI integration for profile extraction
- cv_service: the extraction pipeline
- summary_service: candidate summary document
- session_service: front-end extraction state
"""

from .ai import AIService
from .cv_service import CVService
from .payload_service import PayloadService

__all__ = ["AIService", "CVService", "PayloadService"]
