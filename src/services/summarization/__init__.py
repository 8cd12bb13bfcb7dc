"""
Summarization module - LLM post-processing of stored transcripts.
"""

from .summarizer import TranscriptSummarizer

__all__ = ["TranscriptSummarizer"]
