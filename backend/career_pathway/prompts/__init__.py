"""Prompt templates for LLM interactions.

Each module contains system/user prompt pairs and builder functions for a
specific domain.

Modules:
    career_advisor: Advisory turn, repair and free-text extraction prompts
"""
