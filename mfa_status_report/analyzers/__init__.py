from .method_classifier import (
    METHOD_TYPES,
    MethodCategory,
    MethodClassification,
    classify_method,
    normalize_method_type,
)

__all__ = [
    "METHOD_TYPES",
    "MethodCategory",
    "MethodClassification",
    "classify_method",
    "normalize_method_type",
]
