"""Sample concrete entity used to demonstrate the generic CRUD stack."""

from dataclasses import dataclass

from crud_template.domain.entities.base import BaseEntity


@dataclass(kw_only=True)
class Example(BaseEntity):
    """A named record with a free-text description."""

    name: str = ""
    description: str = ""
