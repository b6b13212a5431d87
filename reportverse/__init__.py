"""ReportVerse - mentor/mentee relationship management API"""

__version__ = "1.0.0"
