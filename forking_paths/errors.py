"""Exception types shared across the game engine.

GameError and its subclasses carry a message meant for the player or GM who
issued the command; the command dispatcher replies with str(error) verbatim.
ConfigurationError is raised while the static game definition is built and
is never caught: a game with a broken definition must not start.
"""


class GameError(RuntimeError):
    """A user-facing failure. The message is shown as the command reply."""


class PermissionDenied(GameError):
    """Raised when a privileged command is issued by a non-GM."""


class SceneNotFound(GameError):
    """Raised when a scene identifier matches no scene."""


class PrepBlocked(GameError):
    """Raised when a pre-prep check fails; the scene transition is not applied."""


class ConfigurationError(RuntimeError):
    """Raised when the static game definition is inconsistent."""
