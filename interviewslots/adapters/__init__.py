"""
Adapters layer - External data sources.
"""

from .json_interview_source import JsonInterviewSource

__all__ = ["JsonInterviewSource"]
