"""
Prompt construction for alt text requests.

A GenerationConfig (detail level + focus level) maps to exactly one
PromptSpec: the instruction sent with every image of a batch and the
response token budget.
"""

from dataclasses import dataclass
from enum import Enum

from config import DETAIL_PROMPTS, FOCUS_INSTRUCTIONS


class DetailLevel(str, Enum):
    QUICKLY = "quickly"
    NORMALLY = "normally"
    FULLY = "fully"


class FocusLevel(str, Enum):
    WHOLE_SCREEN = "whole screen"
    LARGE_IMAGES = "large images"


@dataclass(frozen=True)
class GenerationConfig:
    detail_level: DetailLevel = DetailLevel.NORMALLY
    focus_level: FocusLevel = FocusLevel.WHOLE_SCREEN

    def __post_init__(self):
        # Accept plain strings ("fully", "large images") as well as members
        object.__setattr__(self, "detail_level", DetailLevel(self.detail_level))
        object.__setattr__(self, "focus_level", FocusLevel(self.focus_level))


@dataclass(frozen=True)
class PromptSpec:
    instruction_text: str
    max_response_tokens: int


def build_prompt(detail_level=DetailLevel.NORMALLY, focus_level=FocusLevel.WHOLE_SCREEN):
    """
    Build the instruction text and token budget for a configuration.

    Args:
        detail_level: DetailLevel member or its value
        focus_level: FocusLevel member or its value

    Returns:
        PromptSpec: Detail instruction followed by the focus clause

    Raises:
        ValueError: If either level is unknown
    """
    detail = DETAIL_PROMPTS[DetailLevel(detail_level).value]
    focus_instruction = FOCUS_INSTRUCTIONS[FocusLevel(focus_level).value]
    return PromptSpec(
        instruction_text=f"{detail['prompt']} {focus_instruction}",
        max_response_tokens=detail["max_tokens"],
    )


def prompt_for(config):
    """Build the PromptSpec shared by every image of a batch."""
    return build_prompt(config.detail_level, config.focus_level)
