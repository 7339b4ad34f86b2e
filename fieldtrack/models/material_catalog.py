from sqlalchemy import JSON, Column, Float, String

from fieldtrack.database import Base


class MaterialCatalogItem(Base):
    __tablename__ = "materials_catalog"

    sku = Column(String, primary_key=True)
    material_name = Column(String, nullable=False, index=True)
    category = Column(String, nullable=True)
    unit_price = Column(Float, nullable=True)
    purchase_cost = Column(Float, nullable=True)
    part_length = Column(String, nullable=True)
    # every source spreadsheet row merged under this SKU
    raw_metadata = Column(JSON, nullable=False, default=list)
