from typing import TypedDict


class RuleRegistryEntry(TypedDict, total=False):
    display_name: str
    short_description: str
    description: str
    manual_instructions: str
    proactive_guidance: str
    fixable: bool
    references: list[str]
