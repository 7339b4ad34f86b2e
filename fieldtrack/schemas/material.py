from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from fieldtrack.services.catalog_import import ImportMode


class MaterialResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sku: str
    material_name: str
    category: Optional[str]
    unit_price: Optional[float]
    purchase_cost: Optional[float]
    part_length: Optional[str]
    display_name: str
    raw_metadata: List[Dict[str, Any]]


class ImportResponse(BaseModel):
    mode: ImportMode
    total_rows: int
    unique_materials: int
    imported: int
