"""Settings that change how strictly the rules are applied."""

from pydantic import BaseModel, ConfigDict


class RulesConfig(BaseModel):
    """
    Knobs for the rule engine
    ----

    * strict_legality: drop every destination that leaves the mover's own king in check (or next to the other king).
        Off by default: the mini-game plays by pseudo-legal moves.
    * safe_castling: refuse castling when the king passes over or lands on an attacked square.
    """

    model_config = ConfigDict(frozen=True)

    strict_legality: bool = False
    safe_castling: bool = False


DEFAULT_RULES = RulesConfig()
