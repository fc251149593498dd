"""
Domain error types.

Absence of an entity is never an error in the core (operations return None);
these exceptions cover rule violations only.
"""


class HearingDeskError(Exception):
    """Base class for domain rule violations."""


class InvalidTransitionError(HearingDeskError):
    """Raised when a hearing status change is not allowed by the lifecycle."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move hearing from '{current}' to '{requested}'")


class IneligibleProfessionalError(HearingDeskError):
    """Raised when assigning a professional that fails the eligibility rule."""

    def __init__(self, professional_id: int, hearing_id: int):
        self.professional_id = professional_id
        self.hearing_id = hearing_id
        super().__init__(
            f"Professional {professional_id} is not eligible for hearing {hearing_id}"
        )
