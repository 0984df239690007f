"""
System-wide Pydantic models: evaluator configuration.
"""

import json
import logging
from typing import Literal, Optional

from pydantic import BaseModel, Field, PositiveFloat, PositiveInt

# Configure logger
logger = logging.getLogger(__name__)

SqrtPolicy = Literal["absolute", "relative"]
IfMode = Literal["special", "procedure"]


class EvaluatorConfig(BaseModel):
    """
    Evaluator configuration.

    sqrt_tolerance and sqrt_policy only affect the textbook prelude; if_mode and
    max_depth affect the evaluator itself.
    """
    sqrt_tolerance: PositiveFloat = Field(
        default=0.001,
        description="Threshold used by the prelude's good-enough? test",
    )
    sqrt_policy: SqrtPolicy = Field(
        default="absolute",
        description="'absolute' compares guess^2 with x; 'relative' watches the change between guesses",
    )
    if_mode: IfMode = Field(
        default="special",
        description="'special' short-circuits; 'procedure' evaluates both branches first",
    )
    max_depth: Optional[PositiveInt] = Field(
        default=None,
        description="Maximum nesting of compound-procedure applications; None defers to the host stack",
    )

    @classmethod
    def from_json_file(cls, path: str) -> "EvaluatorConfig":
        """
        Loads and validates a configuration file.

        Raises:
            OSError: If the file cannot be read.
            json.JSONDecodeError: If the file is not valid JSON.
            pydantic.ValidationError: If a field has an invalid value.
        """
        logger.debug(f"Loading evaluator configuration from {path}")
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
        config = cls.model_validate(data)
        logger.info(f"Loaded evaluator configuration: {config.model_dump()}")
        return config
