from pydantic import BaseModel, Field

from lettr.models.base_spec import PromptTemplateSpec


class CompressionInput(BaseModel):
    """Schema for the compression stage input."""
    content: str = Field(..., description="Issue body, already truncated")


COMPRESSION_PROMPT = PromptTemplateSpec(
    name="compression_prompt",
    version="v1.0.0",
    description="Compress an issue the way a reader's AI assistant would.",
    input_schema=CompressionInput,
    template="""
Compress the following article into a summary of at most 100 words.
Keep only the most important information.

ARTICLE:
\"\"\"{content}\"\"\"
"""
)
