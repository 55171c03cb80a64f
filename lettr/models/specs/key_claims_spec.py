from pydantic import BaseModel, Field

from lettr.models.base_spec import PromptTemplateSpec


class KeyClaimsInput(BaseModel):
    """Schema for key claims extraction input."""
    title: str = Field(..., description="The title of the issue")
    content: str = Field(..., description="The issue body")


KEY_CLAIMS_PROMPT = PromptTemplateSpec(
    name="key_claims_prompt",
    version="v1.0.0",
    description="Extract 3 to 5 key claims from an issue.",
    input_schema=KeyClaimsInput,
    template="""
Extract 3 to 5 key claims from the following article. Each claim must:
1. Be a single, self-contained sentence
2. Capture one of the most important insights of the article

Output one claim per line, without numbering or bullets.

TITLE:
\"\"\"{title}\"\"\"
ARTICLE:
\"\"\"{content}\"\"\"
"""
)
