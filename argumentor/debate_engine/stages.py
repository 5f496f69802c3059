"""Stage catalogue for the four-stage structured debate."""

from dataclasses import dataclass

from .types import DebateStage


@dataclass(frozen=True)
class StageInfo:
    """Display metadata for a debate stage."""

    stage: DebateStage
    name: str
    instruction: str
    refutes: DebateStage | None = None  # stage whose opposing entry is answered


STAGES: dict[DebateStage, StageInfo] = {
    DebateStage.INTRO: StageInfo(
        stage=DebateStage.INTRO,
        name="Introduction",
        instruction="Present your initial position on the topic.",
    ),
    DebateStage.REBUTTAL_1: StageInfo(
        stage=DebateStage.REBUTTAL_1,
        name="First Rebuttal",
        instruction="Refute your opponent's introduction.",
        refutes=DebateStage.INTRO,
    ),
    DebateStage.REBUTTAL_2: StageInfo(
        stage=DebateStage.REBUTTAL_2,
        name="Second Rebuttal",
        instruction="Refute your opponent's first rebuttal.",
        refutes=DebateStage.REBUTTAL_1,
    ),
    DebateStage.CONCLUSION: StageInfo(
        stage=DebateStage.CONCLUSION,
        name="Conclusion",
        instruction="Present your final conclusion based on the previous arguments.",
        refutes=DebateStage.REBUTTAL_2,
    ),
}


def get_instruction_for_stage(stage: DebateStage) -> str:
    return STAGES[stage].instruction


def get_stage_to_refute(stage: DebateStage) -> DebateStage | None:
    """Stage immediately preceding `stage`; None for the introduction."""
    return STAGES[stage].refutes
