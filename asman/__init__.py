"""ASman Lesson Studio: lesson content pipeline for Indian classrooms."""

__version__ = "1.0.0"
