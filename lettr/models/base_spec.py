from typing import Any, Optional, Type, TypeVar
from pydantic import BaseModel, Field

InputType = TypeVar('InputType', bound=BaseModel)
OutputType = TypeVar('OutputType', bound=BaseModel)


class BaseSpec(BaseModel):
    """Base class for all specs with common fields."""
    name: str = Field(..., description="Unique identifier for this spec.")
    version: str = Field(..., description="Semantic version (e.g., v1.0.0).")
    description: Optional[str] = \
        Field(None, description="Optional human-readable description.")
    input_schema: Optional[Type[InputType]] = \
        Field(None, description="Schema for prompt inputs.")
    output_schema: Optional[Type[OutputType]] = \
        Field(None, description="Schema for parsed outputs.")

    model_config = {
        "arbitrary_types_allowed": True,
    }

    def validate_input(self, data: Any) -> InputType:
        """Validate input data against the input schema."""
        return self.input_schema.model_validate(data)

    def validate_output(self, data: Any) -> OutputType:
        """Validate output data against the output schema."""
        if self.output_schema is None:
            raise ValueError(f"Spec '{self.name}' has no output schema.")
        return self.output_schema.model_validate(data)


class PromptTemplateSpec(BaseSpec):
    """Specification for prompt templates."""
    template: str = \
        Field(..., description="str.format template with " +
                               "placeholders from input_schema.")
    input_schema: Type[InputType] = \
        Field(..., description="Schema for prompt inputs.")
