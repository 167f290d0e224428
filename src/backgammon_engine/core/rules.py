"""Rule settings for a game.

Rules are fixed when a game is constructed and only read afterwards.
"""

from dataclasses import dataclass, replace

from backgammon_engine.core.errors import RulesInvalid


@dataclass(frozen=True)
class Rules:
    """Rule configuration.

    Attributes:
        points: Points needed to win the match
        beaver: When offered the cube, the receiver may redouble but keep it
        raccoon: After a beaver, the doubler may double again, letting the
            beaverer keep the cube
        murphy: A tied opening roll doubles the cube, which stays centred
        murphy_limit: How often the automatic double applies (0 = always)
        jacoby: Gammons and backgammons only count once the cube was turned
        crawford: No doubling in the game after a player first reaches
            points - 1
        holland: After the Crawford game, doubling only once both players
            have rolled at least twice
    """
    points: int = 7
    beaver: bool = False
    raccoon: bool = False
    murphy: bool = False
    murphy_limit: int = 0
    jacoby: bool = False
    crawford: bool = True
    holland: bool = False

    def with_points(self, points: int) -> "Rules":
        return replace(self, points=points)

    def with_beaver(self) -> "Rules":
        return replace(self, beaver=True)

    def with_raccoon(self) -> "Rules":
        """Raccoon only makes sense on top of beaver, so this turns both on."""
        return replace(self, beaver=True, raccoon=True)

    def with_murphy(self, limit: int = 0) -> "Rules":
        return replace(self, murphy=True, murphy_limit=limit)

    def with_jacoby(self) -> "Rules":
        return replace(self, jacoby=True)

    def with_crawford(self) -> "Rules":
        return replace(self, crawford=True)

    def with_holland(self) -> "Rules":
        """Holland extends Crawford, so this turns both on."""
        return replace(self, crawford=True, holland=True)

    def validate(self) -> "Rules":
        """Check that the settings are consistent.

        Returns:
            self, so it can be chained

        Raises:
            RulesInvalid: If a setting is out of range or depends on a
                setting that is off
        """
        if self.points < 1:
            raise RulesInvalid(f"Points must be positive, got {self.points}")
        if self.raccoon and not self.beaver:
            raise RulesInvalid("Raccoon rule only valid together with beaver rule")
        if self.holland and not self.crawford:
            raise RulesInvalid("Holland rule only valid together with Crawford rule")
        if not 0 <= self.murphy_limit <= 255:
            raise RulesInvalid(f"Murphy limit must be 0-255, got {self.murphy_limit}")
        return self

    def __str__(self) -> str:
        return (
            f"Points: {self.points}, Beaver: {self.beaver}, Raccoon: {self.raccoon}, "
            f"Murphy: {self.murphy}, Murphy Limit: {self.murphy_limit}, "
            f"Jacoby: {self.jacoby}, Crawford: {self.crawford}, Holland: {self.holland}"
        )
