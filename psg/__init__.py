"""
Personalised Study Guide engine.

Estimates learner and course-module learning styles (Felder-Silverman
dimensions) and ranks course content by how well the two align.
"""

__version__ = "1.0.0"
