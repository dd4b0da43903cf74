"""Customer aggregate.

Customers are only needed to attribute orders; the core reads them and
creates one on the fly when an order arrives for an unknown email.
"""

from __future__ import annotations

from dataclasses import dataclass

from storeadmin.domain.exceptions import ValidationError
from storeadmin.domain.model.identifiers import new_id


@dataclass
class Customer:

    id: str
    first_name: str
    last_name: str
    email: str
    phone: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @staticmethod
    def create(first_name: str, last_name: str, email: str, phone: str = "") -> Customer:
        if not first_name or not last_name:
            raise ValidationError(
                "Customer first name and last name are required for new customers"
            )
        if not email or "@" not in email:
            raise ValidationError(f"Invalid customer email: {email!r}")
        return Customer(
            id=new_id(),
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            email=email.strip().lower(),
            phone=phone,
        )
