class Hi18nTrackerError(Exception):
    """Base class for configuration-time faults of the tracking core"""


class PatternError(Hi18nTrackerError):
    """A pattern is malformed (bad or duplicated capture names, empty alternation, ...)"""


class OverlappingEditsError(Hi18nTrackerError):
    """Text edits handed to the applier overlap each other"""
