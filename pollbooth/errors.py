# pollbooth/errors.py
# Failures the voting service reports. Routes turn these into HTTP errors.


class VotingError(Exception):
    """Base class; ``str(err)`` is the message shown to the operator."""


class NotRegistered(VotingError):
    def __init__(self, registration_number: str):
        self.registration_number = registration_number
        super().__init__(f"Registration number {registration_number or '(empty)'} is not on the official roll.")


class IdentityMismatch(VotingError):
    def __init__(self, registration_number: str):
        self.registration_number = registration_number
        super().__init__(f"The name given does not match the roll entry for {registration_number}.")


class AlreadyVoted(VotingError):
    def __init__(self, registration_number: str):
        self.registration_number = registration_number
        super().__init__("This student has already cast their vote.")


class IncompleteBallot(VotingError):
    def __init__(self, missing_positions=()):
        self.missing_positions = list(missing_positions)
        super().__init__("Please select a candidate for every position.")


class InvalidSelection(VotingError):
    pass


class VotingClosed(VotingError):
    def __init__(self, deadline):
        self.deadline = deadline
        super().__init__("Voting has ended!")


class DatabaseError(VotingError):
    """Any backend failure, wrapped with the step that was running."""

    def __init__(self, action: str, cause: Exception):
        self.action = action
        self.cause = cause
        super().__init__(f"Failed to {action}: {cause}")


class CriticalInconsistency(VotingError):
    """Vote recorded but the voter could not be marked as voted.

    Needs manual reconciliation; nothing is rolled back.
    """

    def __init__(self, registration_number: str, cause):
        self.registration_number = registration_number
        self.cause = cause
        super().__init__(
            f"CRITICAL: Vote for {registration_number} recorded, but failed to mark as voted "
            f"({cause}). Manual reconciliation required."
        )


class InvalidTransition(VotingError):
    def __init__(self, state, event):
        self.state = state
        self.event = event
        super().__init__(f"Cannot {event.value} while {state.value}.")


class AuthenticationFailed(VotingError):
    pass
