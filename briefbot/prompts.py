"""Prompt templates for the prompt corner."""

PROMPT_CORNER_SYSTEM_PROMPT = (
    "You write short, practical prompt suggestions for a technical newsletter. "
    "Reply with Markdown only. Do not add a heading; the section heading is supplied separately."
)

PROMPT_CORNER_TEMPLATE = (
    "Based on the following digest content, create at most 3 interesting and practical prompts "
    "that readers can copy and paste into any LLM.\n\n"
    "The prompts should be:\n"
    "- Directly inspired by the topics covered in the digest\n"
    "- Practical and actionable for developers, tech professionals, or curious learners\n"
    "- Self-contained (no need for additional context)\n"
    "- Simple to copy and paste\n"
    "- Encouraging exploration and learning\n\n"
    "Format the output as a clean markdown section with:\n"
    "- A brief intro sentence\n"
    "- Each prompt in a code block for easy copying\n"
    "- A short description after each prompt explaining what it's for\n\n"
    "Here's the digest content:\n"
    "---\n"
    "{digest}\n"
    "---\n\n"
    "Please generate the Prompt Corner section:"
)
