"""Single-table item row: every customer and note lives in this one table."""

from sqlalchemy import JSON, Column, Index, String

from backend.app.db.base_class import Base


class TableItem(Base):
    __tablename__ = "table_items"

    pk = Column(String(255), primary_key=True)
    sk = Column(String(512), primary_key=True)
    # gsi1: type (partition) + created (sort)
    type = Column(String(64), nullable=True)
    created = Column(String(32), nullable=True)
    attributes = Column(JSON, nullable=False, default=dict)

    __table_args__ = (Index("ix_table_items_gsi1", "type", "created"),)

    def to_item(self) -> dict:
        item = dict(self.attributes or {})
        item["pk"] = self.pk
        item["sk"] = self.sk
        return item
