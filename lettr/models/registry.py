import importlib.util
from pathlib import Path

from lettr.models.base_spec import PromptTemplateSpec


SPEC_DIR = Path(__file__).parent / "specs"
PROMPT_SPECS = {}


def load_prompt_specs_from_directory():
    """
    Load all prompt specs from the specs directory.
    """
    for py_file in SPEC_DIR.glob("*.py"):
        if py_file.name.startswith("_"):
            continue

        module_name = f"lettr.models.specs.{py_file.stem}"
        spec = importlib.util.spec_from_file_location(module_name, py_file)
        if not spec or not spec.loader:
            continue

        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)

        for attr_name in dir(module):
            attr = getattr(module, attr_name)
            if isinstance(attr, PromptTemplateSpec):
                PROMPT_SPECS[attr.name] = attr


# Load specs at import
load_prompt_specs_from_directory()


def load_prompt_spec(name: str) -> PromptTemplateSpec:
    """ Load a PromptTemplateSpec from the registry. """
    if name not in PROMPT_SPECS:
        raise ValueError(f"Prompt named '{name}' not found in registry.")
    return PROMPT_SPECS[name]
