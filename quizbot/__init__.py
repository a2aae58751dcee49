"""Selenium quiz bot that answers multiple-choice questions with an LLM."""

__version__ = "0.1.0"
