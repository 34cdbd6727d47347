from siteforge.extensions import db
from .base import BaseModel


class PageSection(BaseModel):
    """A slot on a page; ``data["sectionId"]`` points at a reusable CMSSection."""

    __tablename__ = "page_sections"

    page_id = db.Column(db.String(36), db.ForeignKey("pages.id", ondelete="CASCADE"), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=True)
    component_type = db.Column(db.String(50), nullable=False, default="CUSTOM")  # HERO, VIDEO, CUSTOM...
    order = db.Column(db.Integer, nullable=False, default=0)
    is_visible = db.Column(db.Boolean, nullable=False, default=True)
    data = db.Column(db.JSON, nullable=True)

    page = db.relationship("Page", back_populates="sections")

    __table_args__ = (
        db.Index("idx_page_section_order", "page_id", "order"),
    )

    @property
    def linked_section_id(self):
        if isinstance(self.data, dict):
            return self.data.get("sectionId")
        return None
