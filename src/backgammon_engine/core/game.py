"""The per-game state machine.

A Game composes a Board, the current Dices, a Cube and the read-only
Rules, and decides which action is legal next:

    OPENING --roll (unequal)--> MOVE --dice played--> ROLL (other player)
    ROLL --roll--> MOVE
    ROLL --offer by the other player--> CUBE_OFFERED
    CUBE_OFFERED --accept/beaver--> ROLL (same player)
    CUBE_OFFERED --decline--> ENDED
    MOVE --15th checker off--> ENDED

The cube is offered by the player who just finished a turn, to the player
about to roll (``who_plays``). Taking it leaves the taker on turn, still
owing the roll.

Geometry is delegated to Board, randomness to the injected generator and
stake arithmetic to Cube. Every operation validates completely before it
mutates anything, so a raised error leaves the game as it was.
"""

import logging
from dataclasses import asdict
from typing import Any, Dict, List, Optional

import numpy as np

from backgammon_engine.core.board import Board
from backgammon_engine.core.cube import Cube, doubling_allowed, game_points
from backgammon_engine.core.dice import Dices, new_rng, roll_dice
from backgammon_engine.core.errors import (
    BearOffInvalid,
    CrawfordRestriction,
    CubeReceived,
    DiceInvalid,
    DoublingNotPermitted,
    FieldBlocked,
    FieldInvalid,
    GameEnded,
    GameStarted,
    LegalityError,
    MoveFirst,
    MoveInvalid,
    MoveInvalidBar,
    MovesRemaining,
    NoCubeOffer,
    NotYourTurn,
    PlayerInvalid,
    RollFirst,
)
from backgammon_engine.core.rules import Rules
from backgammon_engine.core.types import (
    BAR,
    NUM_CHECKERS,
    NUM_POINTS,
    OFF,
    PLAYERS,
    EndReason,
    GameOutcome,
    GamePhase,
    MoveStep,
    Player,
    Point,
)

logger = logging.getLogger(__name__)

MAX_SINCE_CRAWFORD = 255


class Game:
    """A single backgammon game in progress.

    Args:
        rules: Rule settings (defaults to ``Rules()``)
        rng: Random source for the dice; seeded from OS entropy if None
        crawford: This game is the Crawford game of its match
        post_crawford: This game directly follows the Crawford game
        murphy_active: Match-level switch for automatic doubles in this game.
            None applies them whenever ``rules.murphy`` is on; the match
            bookkeeper passes False once ``rules.murphy_limit`` games are
            used up.
    """

    def __init__(
        self,
        rules: Optional[Rules] = None,
        rng: Optional[np.random.Generator] = None,
        crawford: bool = False,
        post_crawford: bool = False,
        murphy_active: Optional[bool] = None,
    ):
        self.rules = (rules or Rules()).validate()
        self.rng = rng if rng is not None else new_rng()
        self.board = Board()
        self.dices = Dices()
        self.cube = Cube()
        self.who_plays = Player.NOBODY
        self.cube_received = False
        self.crawford = crawford
        self.post_crawford = post_crawford
        self.since_crawford = 0

        if murphy_active is None:
            murphy_active = self.rules.murphy
        self.murphy_active = self.rules.murphy and murphy_active
        self._murphy_applied = False

        self._must_roll = True
        self._offered_by = Player.NOBODY
        self._pending_value: Optional[int] = None
        self._beavered = False
        self._outcome: Optional[GameOutcome] = None

    # ==========================================================================
    # STATE QUERIES
    # ==========================================================================

    @property
    def phase(self) -> GamePhase:
        if self._outcome is not None:
            return GamePhase.ENDED
        if self.cube_received:
            return GamePhase.CUBE_OFFERED
        if self.who_plays == Player.NOBODY:
            return GamePhase.OPENING
        return GamePhase.ROLL if self._must_roll else GamePhase.MOVE

    @property
    def must_roll(self) -> bool:
        """True while who_plays owes a roll, False while they owe moves."""
        return self._must_roll

    @property
    def pending_offer(self) -> Optional[int]:
        """Cube value on offer, None without a pending offer."""
        return self._pending_value

    def is_over(self) -> bool:
        return self._outcome is not None

    def outcome(self) -> Optional[GameOutcome]:
        return self._outcome

    def winner(self) -> Player:
        return self._outcome.winner if self._outcome else Player.NOBODY

    def doubling_allowed(self) -> bool:
        """Whether the Crawford/Holland rules allow doubling right now."""
        return doubling_allowed(
            self.rules, self.crawford, self.post_crawford, self.since_crawford
        )

    # ==========================================================================
    # DICE
    # ==========================================================================

    def roll(self, by: Player) -> Dices:
        """Roll the dice for ``by``.

        Before anyone plays, any caller may roll the opening. A tied opening
        decides nothing and must be rolled again; otherwise the higher die's
        owner (die 0 belongs to Player 0) plays that very roll.

        Args:
            by: Player rolling

        Returns:
            The rolled dice

        Raises:
            GameEnded: If the game is over
            CubeReceived: If a double is waiting for an answer
            PlayerInvalid: If by is NOBODY after the opening
            NotYourTurn: If the other player is on turn
            MoveFirst: If dice from the previous roll are still unplayed
        """
        self._check_running()
        if self.cube_received:
            raise CubeReceived()
        if self.who_plays == Player.NOBODY:
            return self._opening_roll()
        if by == Player.NOBODY:
            raise PlayerInvalid("Player.NOBODY cannot roll once the game has started")
        if by != self.who_plays:
            raise NotYourTurn(f"{self.who_plays} is on turn")
        if not self._must_roll:
            raise MoveFirst(f"{by} still has {self.dices.available()} to play")

        self.dices = roll_dice(self.rng)
        self._must_roll = False
        self._beavered = False
        logger.debug("%s rolled %s", by, self.dices.values)
        return self.dices

    def start(self) -> Dices:
        """Roll openings until one decides who begins.

        Returns:
            The deciding roll, which the starting player now plays

        Raises:
            GameStarted: If a player is already on turn
        """
        self._check_running()
        if self.who_plays != Player.NOBODY:
            raise GameStarted()
        dices = self.roll(Player.NOBODY)
        while self.who_plays == Player.NOBODY:
            dices = self.roll(Player.NOBODY)
        return dices

    def _opening_roll(self) -> Dices:
        dices = roll_dice(self.rng)
        die0, die1 = dices.values
        if die0 == die1:
            # nothing to play until the opening is decided
            self.dices = dices.exhaust()
            logger.debug("Opening roll tied at %s", die0)
            if self.murphy_active and not self._murphy_applied:
                self.cube.set(self.cube.value() * 2)
                self._murphy_applied = True
                logger.debug("Automatic double, cube now %d", self.cube.value())
            return self.dices

        self.who_plays = Player.PLAYER0 if die0 > die1 else Player.PLAYER1
        self.dices = dices
        self._must_roll = False
        logger.debug("Opening roll %s, %s begins", dices.values, self.who_plays)
        return dices

    # ==========================================================================
    # CHECKER MOVES
    # ==========================================================================

    def move_checker(self, player: Player, die_value: int, from_point: Point) -> MoveStep:
        """Move one checker ``die_value`` points from ``from_point``.

        Moving past point 0 bears the checker off.

        Args:
            player: Player moving
            die_value: Face value to use
            from_point: Source point in the player's numbering

        Returns:
            The executed step

        Raises:
            GameEnded, CubeReceived, PlayerInvalid, NotYourTurn, RollFirst:
                If it is not this player's move
            DiceInvalid: If die_value is not among the unplayed dice
            MoveInvalidBar: If the player has checkers on the bar
            FieldInvalid: If from_point is outside 0-23, the bar included
            MoveInvalid: If there is no checker on from_point
            FieldBlocked: If the destination is held by the opponent
            BearOffInvalid: If bearing off is not allowed yet
        """
        self._check_can_move(player, die_value)
        if not 0 <= from_point < NUM_POINTS:
            raise FieldInvalid(f"Point {from_point} is outside 0-{NUM_POINTS - 1}")
        step = self._plan(player, die_value, from_point)
        return self._execute(player, step)

    def move_checker_from_bar(self, player: Player, die_value: int) -> MoveStep:
        """Enter a checker from the bar onto point ``24 - die_value``.

        Raises:
            MoveInvalid: If the player has no checker on the bar
            FieldBlocked: If the entry point is held by the opponent
            (plus the sequencing errors of ``move_checker``)
        """
        self._check_can_move(player, die_value)
        step = self._plan(player, die_value, BAR)
        return self._execute(player, step)

    def legal_moves(self, player: Player) -> List[MoveStep]:
        """Single-checker moves ``player`` could make right now.

        One entry per distinct die value and source point. Whole-turn
        combinations are not considered.
        """
        if (
            self.is_over()
            or self.cube_received
            or player == Player.NOBODY
            or player != self.who_plays
            or self._must_roll
        ):
            return []

        if self.board.bar(player) > 0:
            sources = [BAR]
        else:
            sources = [p for p, count in enumerate(self.board.points(player)) if count > 0]

        moves = []
        for die in sorted(set(self.dices.available())):
            for source in sources:
                try:
                    moves.append(self._plan(player, die, source))
                except LegalityError:
                    continue
        return moves

    def pass_turn(self, player: Player) -> None:
        """Give up the remaining dice when none of them can be played.

        Raises:
            MovesRemaining: If a legal move exists
            (plus the sequencing errors of ``move_checker``)
        """
        self._check_move_turn(player)
        moves = self.legal_moves(player)
        if moves:
            raise MovesRemaining(f"{player} can still play, e.g. {moves[0]}")
        logger.debug("%s cannot play %s", player, self.dices.available())
        self.dices = self.dices.exhaust()
        self._end_turn()

    def _plan(self, player: Player, die: int, source: Point) -> MoveStep:
        """Validate a single move without touching the board."""
        board = self.board
        if source == BAR:
            if board.bar(player) == 0:
                raise MoveInvalid(f"{player} has no checker on the bar")
            target = BAR - die
            if not board.can_land(player, target):
                raise FieldBlocked(f"Entry point {target} is blocked for {player}")
            return MoveStep(BAR, target, die, board.is_blot(player, target))

        if board.bar(player) > 0:
            raise MoveInvalidBar()
        if board.count(player, source) == 0:
            raise MoveInvalid(f"{player} has no checker on point {source}")

        target = source - die
        if target < 0:
            self._check_bear_off(player, source, target)
            return MoveStep(source, OFF, die)
        if not board.can_land(player, target):
            raise FieldBlocked(f"Point {target} is blocked for {player}")
        return MoveStep(source, target, die, board.is_blot(player, target))

    def _check_bear_off(self, player: Player, source: Point, target: int) -> None:
        if not self.board.all_home(player):
            raise BearOffInvalid(f"{player} still has checkers outside the home board")
        # a larger die than needed may only move the rearmost checker
        if target < OFF and self.board.highest_point(player) != source:
            raise BearOffInvalid(
                f"Die overshoots; {player} must bear off from point "
                f"{self.board.highest_point(player)} or move inside the home board"
            )

    def _execute(self, player: Player, step: MoveStep) -> MoveStep:
        if step.is_entry:
            self.board.set_bar(player, -1)
        else:
            self.board.set(player, step.from_point, -1)

        if step.is_bear_off:
            self.board.set_off(player, 1)
        else:
            self.board.set(player, step.to_point, 1)

        self.dices = self.dices.consume(step.die_used)
        logger.debug(
            "%s moved %s -> %s with %d%s",
            player,
            "bar" if step.is_entry else step.from_point,
            "off" if step.is_bear_off else step.to_point,
            step.die_used,
            " (hit)" if step.hits_opponent else "",
        )

        if self.board.off(player) == NUM_CHECKERS:
            self._finish_borne_off(player)
        elif self.dices.is_consumed():
            self._end_turn()
        return step

    def _end_turn(self) -> None:
        finished = self.who_plays
        self.who_plays = finished.other()
        self._must_roll = True
        self.since_crawford = min(self.since_crawford + 1, MAX_SINCE_CRAWFORD)
        logger.debug("%s finished the turn, %s to roll", finished, self.who_plays)

    # ==========================================================================
    # DOUBLING CUBE
    # ==========================================================================

    def offer(self, by: Player) -> int:
        """Offer the cube to the player about to roll.

        Args:
            by: Player offering; must be the one who just finished a turn

        Returns:
            The cube value on offer

        Raises:
            GameEnded: If the game is over
            PlayerInvalid: If by is NOBODY
            CubeReceived: If an offer is already pending
            CrawfordRestriction: If the Crawford/Holland rules forbid doubling
            NotYourTurn: If the opponent is not about to roll
            DoublingNotPermitted: If the opponent already holds the cube
        """
        self._check_running()
        if by == Player.NOBODY:
            raise PlayerInvalid("Player.NOBODY cannot offer the cube")
        if self.cube_received:
            raise CubeReceived()
        if not self.doubling_allowed():
            raise CrawfordRestriction()
        if self.who_plays == Player.NOBODY or by != self.who_plays.other():
            raise NotYourTurn("The cube can only be offered to the player about to roll")
        if not self._must_roll:
            raise NotYourTurn(f"{self.who_plays} has already rolled")

        value = self.cube.offer(self.who_plays)
        self.cube_received = True
        self._offered_by = by
        self._pending_value = value
        logger.debug("%s offers the cube at %d to %s", by, value, self.who_plays)
        return value

    def accept(self, by: Optional[Player] = None) -> int:
        """Take the pending double.

        The taker owns the cube at the offered value and still owes the roll.

        Args:
            by: Optional check that the caller is the receiving player

        Returns:
            The new cube value
        """
        receiver = self._check_responder(by)
        self.cube.set(self._pending_value)
        self.cube.set_owner(receiver)
        self._clear_offer()
        logger.debug("%s takes, cube at %d", receiver, self.cube.value())
        return self.cube.value()

    def decline(self, by: Optional[Player] = None) -> GameOutcome:
        """Pass the pending double; the offering player wins the current stake."""
        receiver = self._check_responder(by)
        outcome = GameOutcome(
            winner=receiver.other(),
            points=self.cube.value(),
            reason=EndReason.DOUBLE_DECLINED,
        )
        self._clear_offer()
        self._outcome = outcome
        logger.info("%s passes, %s wins %d", receiver, outcome.winner, outcome.points)
        return outcome

    def beaver(self, by: Optional[Player] = None) -> int:
        """Take the pending double and immediately redouble, keeping the cube.

        Raises:
            DoublingNotPermitted: If the beaver rule is off
        """
        receiver = self._check_responder(by)
        if not self.rules.beaver:
            raise DoublingNotPermitted("Beaver rule not in effect")
        self.cube.set(self._pending_value * 2)
        self.cube.set_owner(receiver)
        self._clear_offer()
        self._beavered = True
        logger.debug("%s beavers, cube at %d", receiver, self.cube.value())
        return self.cube.value()

    def raccoon(self, by: Player) -> int:
        """Double again right after a beaver; the beaverer keeps the cube.

        Args:
            by: The player whose double was beavered

        Raises:
            DoublingNotPermitted: If the raccoon rule is off or the last cube
                action was not a beaver
            NotYourTurn: If by is not the player whose double was beavered
        """
        self._check_running()
        if by == Player.NOBODY:
            raise PlayerInvalid("Player.NOBODY cannot raccoon")
        if not self.rules.raccoon:
            raise DoublingNotPermitted("Raccoon rule not in effect")
        if not self._beavered:
            raise DoublingNotPermitted("Raccoon is only possible right after a beaver")
        if by != self._offered_by:
            raise NotYourTurn(f"Only {self._offered_by} may raccoon")

        self.cube.set(self.cube.value() * 2)
        self._beavered = False
        logger.debug("%s raccoons, cube at %d", by, self.cube.value())
        return self.cube.value()

    def _check_responder(self, by: Optional[Player]) -> Player:
        self._check_running()
        if not self.cube_received:
            raise NoCubeOffer()
        if by is not None and by != self.who_plays:
            if by == Player.NOBODY:
                raise PlayerInvalid("Player.NOBODY cannot answer a double")
            raise NotYourTurn(f"The double was offered to {self.who_plays}")
        return self.who_plays

    def _clear_offer(self) -> None:
        self.cube_received = False
        self._pending_value = None

    # ==========================================================================
    # GAME END
    # ==========================================================================

    def _finish_borne_off(self, player: Player) -> None:
        loser = player.other()
        if self.board.off(loser) > 0:
            multiplier = 1
        elif self.board.bar(loser) > 0 or any(self.board.points(loser)[18:]):
            # loser still on the bar or in the winner's home board
            multiplier = 3
        else:
            multiplier = 2
        if self.rules.jacoby and self.cube.owner() == Player.NOBODY:
            multiplier = 1

        self._outcome = GameOutcome(
            winner=player,
            points=game_points(multiplier, self.cube),
            multiplier=multiplier,
            reason=EndReason.BORNE_OFF,
        )
        logger.info("%s bore off all checkers, wins %d", player, self._outcome.points)

    # ==========================================================================
    # GUARDS
    # ==========================================================================

    def _check_running(self) -> None:
        if self._outcome is not None:
            raise GameEnded()

    def _check_move_turn(self, player: Player) -> None:
        self._check_running()
        if self.cube_received:
            raise CubeReceived()
        if player == Player.NOBODY:
            raise PlayerInvalid("Player.NOBODY cannot move")
        if player != self.who_plays:
            raise NotYourTurn(f"{self.who_plays} is on turn")
        if self._must_roll:
            raise RollFirst()

    def _check_can_move(self, player: Player, die_value: int) -> None:
        self._check_move_turn(player)
        if not self.dices.can_use(die_value):
            raise DiceInvalid(
                f"Die value {die_value} not available (remaining {self.dices.available()})"
            )

    # ==========================================================================
    # EXPORT
    # ==========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """Plain snapshot of the game state for persistence collaborators."""
        return {
            "rules": asdict(self.rules),
            "dices": {
                "values": list(self.dices.values),
                "consumed": list(self.dices.consumed),
            },
            "who_plays": self.who_plays.value,
            "board": {
                player.value: {
                    "points": list(self.board.points(player)),
                    "bar": self.board.bar(player),
                    "off": self.board.off(player),
                }
                for player in PLAYERS
            },
            "cube": {
                "exponent": self.cube.exponent,
                "owner": self.cube.owner().value,
            },
            "cube_received": self.cube_received,
            "crawford": self.crawford,
            "post_crawford": self.post_crawford,
            "since_crawford": self.since_crawford,
        }

    def __str__(self) -> str:
        display = self.board.get()
        lines = [
            f"Rules: {self.rules}",
            f"Dices: {self.dices.values} consumed {self.dices.consumed}",
            f"Cube: {self.cube.value()}",
            f"Cube owner: {self.cube.owner()}",
            f"Who plays: {self.who_plays}",
            f"Phase: {self.phase.value}",
            f"Board: {display.board}",
            f"Bar: {display.bar}",
            f"Off: {display.off}",
            f"Crawford game: {self.crawford}",
            f"Since Crawford game: {self.since_crawford}",
        ]
        return "\n".join(lines)
