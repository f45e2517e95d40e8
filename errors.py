class WellnessError(Exception):
    # Base class for intended, meaningful failures of the assessment service.
    pass


class UnknownDomainError(WellnessError, ValueError):
    # Raised when a caller asks for a domain outside mental/physical/cognitive.
    def __init__(self, domain):
        self.domain = domain
        super().__init__(f"Unknown assessment domain: {domain!r}")


class AssessmentNotFoundError(WellnessError, LookupError):
    # Raised when no stored assessment matches a lookup.
    pass
