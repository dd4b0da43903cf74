"""JSON-file-backed implementation of CustomerRepository."""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path

from storeadmin.domain.model.customer import Customer
from storeadmin.domain.repository.customer_repository import CustomerRepository
from storeadmin.infrastructure.persistence.json_file import JsonFile


class JsonCustomerRepository(CustomerRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    def get_by_id(self, customer_id: str) -> Customer | None:
        for raw in self._file.load():
            if raw["id"] == customer_id:
                return Customer(**raw)
        return None

    def get_by_email(self, email: str) -> Customer | None:
        for raw in self._file.load():
            if raw["email"].lower() == email.strip().lower():
                return Customer(**raw)
        return None

    def save(self, customer: Customer) -> None:
        self._file.upsert(asdict(customer))
