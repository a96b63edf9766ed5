class LinterError(Exception):
    """Base class for lint engine errors"""


class RuleOptionsError(LinterError):
    """A rule's options failed validation"""
