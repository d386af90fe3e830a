"""
Model definition and runtime package.

Exports the builder entry point, the runtime model, the schema types and the
stock validation rules.
"""

from dynamodel.models.builder import ModelBuilder, define_dynamo_model
from dynamodel.models.callbacks import run_callbacks
from dynamodel.models.model import Model
from dynamodel.models.schema import (
    Association,
    AssociationType,
    CallbackEvent,
    IndexDefinition,
    ModelSchema,
    naive_singularize,
)
from dynamodel.models.validation import (
    format,
    in_range,
    max_length,
    min_length,
    required,
    validate_record,
)

__all__ = [
    # Builder & runtime
    "ModelBuilder",
    "Model",
    "define_dynamo_model",
    # Schema
    "Association",
    "AssociationType",
    "CallbackEvent",
    "IndexDefinition",
    "ModelSchema",
    "naive_singularize",
    # Pipelines
    "run_callbacks",
    "validate_record",
    # Validation rules
    "format",
    "in_range",
    "max_length",
    "min_length",
    "required",
]
