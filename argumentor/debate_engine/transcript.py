"""Export of a debate and its arguments as a JSON-ready transcript."""

from typing import Any

from .models import Argument, Debate
from .types import STAGE_ORDER, Position

ROLE_LABELS = {Position.FAVOR: "pro", Position.AGAINST: "con"}


def build_transcript(debate: Debate, arguments: list[Argument]) -> dict[str, Any]:
    """Arrange a debate as {"debate": {"topic", "participants", "stages"}}.

    Each stage lists the pro entry before the con entry. Stages without
    arguments are present with an empty list.
    """
    stages: dict[str, list[dict[str, str]]] = {}
    for stage in STAGE_ORDER:
        stage_arguments = sorted(
            (arg for arg in arguments if arg.stage is stage),
            key=lambda arg: 0 if arg.position is Position.FAVOR else 1,
        )
        stages[stage.value.lower()] = [
            {"role": ROLE_LABELS[arg.position], "text": arg.content}
            for arg in stage_arguments
        ]

    return {
        "debate": {
            "topic": debate.title,
            "participants": {
                "pro": debate.participant_favor_user_id,
                "con": debate.participant_contra_user_id,
            },
            "stages": stages,
        }
    }
