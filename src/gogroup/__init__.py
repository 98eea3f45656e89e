from __future__ import annotations

from .config import GroupOrder, parse_order_specs
from .errors import FormatterError, GoGroupError, OrderSpecError, ParseError, StaleFileError
from .grouper import (
    CombinedGrouper,
    ConfiguredGrouper,
    DepthGrouper,
    GoimportsGrouper,
    Grouper,
    LocalMiddleGrouper,
    StdOtherGrouper,
)
from .models import GroupedImport, ImportSpec, ValidationError, ViolationKind
from .processor import Processor

__version__ = "0.1.0"

__all__ = [
    "CombinedGrouper",
    "ConfiguredGrouper",
    "DepthGrouper",
    "FormatterError",
    "GoGroupError",
    "GoimportsGrouper",
    "GroupOrder",
    "GroupedImport",
    "Grouper",
    "ImportSpec",
    "LocalMiddleGrouper",
    "OrderSpecError",
    "ParseError",
    "Processor",
    "StaleFileError",
    "StdOtherGrouper",
    "ValidationError",
    "ViolationKind",
    "parse_order_specs",
]
