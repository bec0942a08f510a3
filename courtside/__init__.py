"""Courtside Analyst API: NCAA basketball standings and LLM team analysis."""
