"""
exam_api - HTTP service around the exam grading core

Loads exams, grades live sessions, persists submissions and rebuilds reviews.
"""

__version__ = "0.1.0"
