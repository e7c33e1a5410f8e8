"""
Topic categorization: up to two main categories from the closed list plus
free-form subcategories.
"""

from ..llm.envelope import StructuredCaller, TaskDescriptor
from ..llm.schemas import Categorization
from .prompts import CATEGORIZATION_SYSTEM_PROMPT

CATEGORIZATION_MAX_TOKENS = 300


async def categorize_post(caller: StructuredCaller, post: str) -> Categorization:
    task = TaskDescriptor(
        system_instructions=CATEGORIZATION_SYSTEM_PROMPT,
        user_content=post,
        output_schema=Categorization,
        max_attempts=caller.policy.max_attempts,
        max_output_tokens=CATEGORIZATION_MAX_TOKENS,
    )
    return await caller.call(task)
