class MindReaderError(Exception):
    """Base class for errors raised to callers of the game layer."""


class InvalidMoveSymbol(MindReaderError, ValueError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid move symbol: {value!r} (expected rock, paper or scissors)")


class InvalidUsername(MindReaderError, ValueError):
    pass


class GameNotFound(MindReaderError, LookupError):
    def __init__(self, game_id: str):
        self.game_id = game_id
        super().__init__(f"Game not found: {game_id}")


class GameNotActive(MindReaderError):
    def __init__(self, game_id: str, status: str):
        self.game_id = game_id
        self.status = status
        super().__init__(f"Game {game_id} is not active (status={status})")


class PlayerNotAuthorized(MindReaderError):
    def __init__(self, game_id: str, player_id: str):
        self.game_id = game_id
        self.player_id = player_id
        super().__init__(f"Player {player_id} is not authorized for game {game_id}")
