"""
Prompt templates for the research engine.
"""
