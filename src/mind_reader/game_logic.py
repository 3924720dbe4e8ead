from mind_reader.errors import InvalidMoveSymbol

CHOICES = ["rock", "paper", "scissors"]
BEATS = {"rock": "scissors", "paper": "rock", "scissors": "paper"}
BEATEN_BY = {v: k for k, v in BEATS.items()}  # inverse


def validate_choice(value) -> str:
    """Normalize a raw symbol; raise InvalidMoveSymbol if it is not rock/paper/scissors."""
    choice = str(value or "").strip().lower()
    if choice not in BEATS:
        raise InvalidMoveSymbol(value)
    return choice


def counter_move(choice: str) -> str:
    """The symbol that beats `choice`."""
    return BEATEN_BY[choice]


def determine_winner(player: str, ai: str) -> str:
    """
    Return one of: 'player' | 'ai' | 'tie'
    """
    if player == ai:
        return "tie"
    return "player" if BEATS[player] == ai else "ai"


def adjudicate(player: str, ai: str) -> str:
    """
    Return one of: 'win' | 'lose' | 'tie' | 'invalid'
    """
    if player not in BEATS or ai not in BEATS:
        return "invalid"
    return {"player": "win", "ai": "lose", "tie": "tie"}[determine_winner(player, ai)]
