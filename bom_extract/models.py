#!/usr/bin/env python3
"""
BOM extraction models
Immutable records produced by every extractor
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class ItemType(str, Enum):
    INGREDIENT = 'ingredient'
    PACKAGING = 'packaging'


# Fields a reviewer has to fill in by hand when extraction left them empty
REVIEW_FIELDS = ('quantity', 'unit', 'unit_cost', 'total_cost')


@dataclass(frozen=True)
class ExtractedLineItem:
    """One BOM line as recovered from a supplier document"""
    raw_name: str
    clean_name: str
    quantity: Optional[float]
    unit: Optional[str]
    item_type: ItemType
    unit_cost: Optional[float]
    total_cost: Optional[float]

    @property
    def missing_fields(self) -> Tuple[str, ...]:
        """Names of the review fields that are still empty"""
        return tuple(name for name in REVIEW_FIELDS if getattr(self, name) is None)

    @property
    def needs_review(self) -> bool:
        return bool(self.missing_fields)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'raw_name': self.raw_name,
            'clean_name': self.clean_name,
            'quantity': self.quantity,
            'unit': self.unit,
            'item_type': self.item_type.value,
            'unit_cost': self.unit_cost,
            'total_cost': self.total_cost,
        }


@dataclass(frozen=True)
class ParseMetadata:
    """Document-level fields found anywhere in the raw text"""
    product_code: Optional[str] = None
    product_description: Optional[str] = None
    total_value: Optional[float] = None
    created_date: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'product_code': self.product_code,
            'product_description': self.product_description,
            'total_value': self.total_value,
            'created_date': self.created_date,
        }
        return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class ParseResult:
    """
    Outcome of one extraction call

    success is True exactly when at least one item was extracted; structural
    failures carry one error string and no items.
    """
    success: bool
    items: Tuple[ExtractedLineItem, ...] = ()
    errors: Tuple[str, ...] = ()
    metadata: ParseMetadata = field(default_factory=ParseMetadata)

    @classmethod
    def from_items(cls, items, metadata: Optional[ParseMetadata] = None,
                   empty_error: str = 'No items could be extracted') -> 'ParseResult':
        """Build a result from extracted items, recording empty_error when there are none"""
        items = tuple(items)
        metadata = metadata or ParseMetadata()
        if not items:
            return cls(success=False, items=(), errors=(empty_error,), metadata=metadata)
        return cls(success=True, items=items, errors=(), metadata=metadata)

    @classmethod
    def failure(cls, error: str, metadata: Optional[ParseMetadata] = None) -> 'ParseResult':
        return cls(success=False, items=(), errors=(error,), metadata=metadata or ParseMetadata())

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'items': [item.to_dict() for item in self.items],
            'errors': list(self.errors),
            'metadata': self.metadata.to_dict(),
        }
