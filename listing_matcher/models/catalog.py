"""Pydantic models for catalog products and retailer listings."""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, Optional


class Product(BaseModel):
    """Canonical catalog entry.
    
    Input records name the unique key ``product_name``; it is exposed as
    ``product_id``. Only manufacturer, family and model take part in
    matching; any other keys are kept as extra fields.
    """
    
    product_id: str = Field(..., alias="product_name", description="Globally unique product key")
    manufacturer: str = Field(..., description="Manufacturer name as given in the catalog")
    model: str = Field(..., description="Model identifier as given in the catalog")
    family: Optional[str] = Field(default=None, description="Optional product line")
    announced_date: Optional[str] = Field(default=None, alias="announced-date")
    
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="allow",
        protected_namespaces=(),
        json_schema_extra={
            "example": {
                "product_name": "Canon_EOS_5D",
                "manufacturer": "Canon",
                "model": "EOS 5D",
                "family": "EOS",
                "announced-date": "2005-08-21T20:00:00.000-04:00",
            }
        },
    )
    
    @field_validator('product_id', 'manufacturer', 'model')
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject required fields that are empty or whitespace only."""
        if not v.strip():
            raise ValueError('must not be blank')
        return v
    
    @field_validator('family')
    @classmethod
    def validate_family(cls, v: Optional[str]) -> Optional[str]:
        """Treat a blank family the same as a missing one."""
        if v is not None and not v.strip():
            return None
        return v


class Listing(BaseModel):
    """Retailer offer to be classified against the catalog.
    
    ``price`` and ``currency`` are carried through; numbers are stored as
    strings. ``manufacturer`` must be present but may be empty, in which
    case the title alone decides the match.
    """
    
    title: str = Field(..., description="Free-text listing title")
    manufacturer: str = Field(..., description="Manufacturer as given by the retailer")
    currency: Optional[str] = None
    price: Optional[str] = None
    
    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        json_schema_extra={
            "example": {
                "title": "Canon EOS 5D 12.8MP Digital SLR Camera (Body Only)",
                "manufacturer": "Canon Canada",
                "currency": "CAD",
                "price": "1299.99",
            }
        },
    )
    
    @field_validator('title')
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Reject an empty or whitespace-only title."""
        if not v.strip():
            raise ValueError('must not be blank')
        return v
    
    @field_validator('price', 'currency', mode='before')
    @classmethod
    def coerce_to_string(cls, v: Any) -> Any:
        """Keep numeric passthrough values as strings."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v
    
    def to_record(self) -> Dict[str, Any]:
        """Convert to an output record; null and unset values are omitted."""
        return self.model_dump(exclude_none=True)
