"""Core domain services of the Q&A bot."""
