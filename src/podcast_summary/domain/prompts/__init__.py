"""Prompt templates for transcription and summarization"""

from podcast_summary.domain.prompts.summary_prompts import SummaryPromptBuilder

__all__ = ["SummaryPromptBuilder"]
