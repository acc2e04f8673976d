"""Per-request payment pipeline transitions enforced by the orchestrator."""

RECEIVED = "RECEIVED"
VALIDATED = "VALIDATED"
TOKENIZED = "TOKENIZED"
AUTHORIZED = "AUTHORIZED"
RECORDED = "RECORDED"
RESPONDED = "RESPONDED"

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    RECEIVED: {VALIDATED, RESPONDED},
    VALIDATED: {TOKENIZED},
    TOKENIZED: {AUTHORIZED},
    AUTHORIZED: {RECORDED, RESPONDED},
    RECORDED: {RESPONDED},
    RESPONDED: set(),
}


def validate_transition(current: str, new: str) -> None:
    """Raise when a transition is not allowed by the state machine."""

    if new not in ALLOWED_TRANSITIONS.get(current, set()):
        raise ValueError(f"Invalid transition: {current} -> {new}")
