"""SQLAlchemy ORM model for the Example entity."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from crud_template.infrastructure.database.base import AuditMixin, Base
from crud_template.infrastructure.database.tables import EXAMPLE_TABLE


class ExampleModel(AuditMixin, Base):
    """ORM model — maps to the 'example_table' table."""

    __tablename__ = EXAMPLE_TABLE.name
    __table_args__ = {
        "schema": EXAMPLE_TABLE.schema,
        "comment": EXAMPLE_TABLE.description,
    }

    name: Mapped[str] = mapped_column(String(255), nullable=False, comment="Example name")
    description: Mapped[str] = mapped_column(Text, nullable=False, comment="Example description")

    def __repr__(self) -> str:
        return f"<ExampleModel(id={self.id}, name='{self.name}')>"
