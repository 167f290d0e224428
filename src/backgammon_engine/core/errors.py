"""Exceptions raised by the rules engine.

Every illegal operation raises one of these and leaves the game untouched,
so callers can fix their input and retry against the same state.

    BackgammonError
    +-- SequenceError      wrong moment (turn order, roll/move phases, cube)
    +-- LegalityError      wrong geometry or dice
    +-- CubeError          doubling cube misuse
    +-- PlayerInvalid      Player.NOBODY passed where a side is required
    +-- RulesInvalid       inconsistent rule configuration
"""


class BackgammonError(ValueError):
    """Base class for all rules engine errors."""

    default_message = "Backgammon error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)


# ==============================================================================
# SEQUENCING
# ==============================================================================


class SequenceError(BackgammonError):
    default_message = "Action not allowed at this point of the game"


class NotYourTurn(SequenceError):
    default_message = "Opponent's turn"


class RollFirst(SequenceError):
    default_message = "Dice must be rolled before moving"


class MoveFirst(SequenceError):
    default_message = "Remaining dice must be played before rolling again"


class CubeReceived(SequenceError):
    default_message = "A doubling offer is pending; accept or decline it first"


class GameStarted(SequenceError):
    default_message = "Game has already started"


class GameEnded(SequenceError):
    default_message = "Game has already ended"


# ==============================================================================
# LEGALITY
# ==============================================================================


class LegalityError(BackgammonError):
    default_message = "Illegal move"


class FieldInvalid(LegalityError):
    default_message = "Invalid field"


class FieldBlocked(LegalityError):
    default_message = "Field blocked"


class MoveInvalid(LegalityError):
    default_message = "Invalid move"


class MoveInvalidBar(MoveInvalid):
    default_message = "Checkers on the bar must be entered first"


class BearOffInvalid(MoveInvalid):
    default_message = "Bearing off is not allowed here"


class MovesRemaining(MoveInvalid):
    default_message = "A legal move is still available"


class DiceInvalid(LegalityError):
    default_message = "Die value not available"


class PositionInvalid(LegalityError):
    default_message = "Invalid board position"


# ==============================================================================
# CUBE
# ==============================================================================


class CubeError(BackgammonError):
    default_message = "Cube error"


class InvalidCubeValue(CubeError):
    default_message = "Invalid cube value"


class DoublingNotPermitted(CubeError):
    default_message = "Doubling not permitted"


class CrawfordRestriction(DoublingNotPermitted):
    default_message = "Doubling not permitted in the Crawford game"


class NoCubeOffer(CubeError):
    default_message = "No doubling offer is pending"


# ==============================================================================
# ACTORS AND CONFIGURATION
# ==============================================================================


class PlayerInvalid(BackgammonError):
    default_message = "Invalid player"


class RulesInvalid(BackgammonError):
    default_message = "Invalid rules"
