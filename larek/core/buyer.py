from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, Mapping, Optional, Union

from larek.constants import ERR_ADDRESS, ERR_EMAIL, ERR_PHONE
from larek.core.events import BuyerChanged, EventBus
from larek.core.types import BUYER_FIELDS, BuyerDraft, Payment, ValidationResult
from larek.utils.validators import is_filled, is_valid_email, is_valid_phone


class BuyerStore:
    """
    Checkout form of the current buyer: payment method, email, phone and
    delivery address.

    Every call that changes the draft emits exactly one `buyer:changed` with
    the whole draft, so subscribers never see a half-applied update.
    Validation is read-only and emits nothing.
    """

    def __init__(self, bus: EventBus) -> None:
        self._bus = bus
        self._draft = BuyerDraft()

    def get_buyer_data(self) -> BuyerDraft:
        return self._draft

    def set_payment(self, payment: Union[Payment, str]) -> None:
        self.set_buyer_data({"payment": payment})

    def set_email(self, email: str) -> None:
        self.set_buyer_data({"email": email})

    def set_phone(self, phone: str) -> None:
        self.set_buyer_data({"phone": phone})

    def set_address(self, address: str) -> None:
        self.set_buyer_data({"address": address})

    def set_buyer_data(self, data: Optional[Mapping[str, Any]] = None, **fields: Any) -> bool:
        """
        Applies any subset of the draft fields in one go.

        Keys set to None are skipped. Returns False and emits nothing when no
        field was supplied.
        """
        changes: Dict[str, Any] = {**(data or {}), **fields}
        unknown = set(changes) - set(BUYER_FIELDS)
        if unknown:
            raise ValueError(f"unknown buyer fields: {', '.join(sorted(unknown))}")

        values: Dict[str, Any] = {}
        for key, value in changes.items():
            if value is None:
                continue
            values[key] = Payment(value) if key == "payment" else str(value).strip()

        if not values:
            return False

        self._draft = replace(self._draft, **values)
        self._emit_change()
        return True

    def clear_buyer_data(self) -> None:
        self._draft = BuyerDraft()
        self._emit_change()

    def is_valid_email(self) -> bool:
        return is_valid_email(self._draft.email)

    def is_valid_phone(self) -> bool:
        return is_valid_phone(self._draft.phone)

    def is_valid_address(self) -> bool:
        return is_filled(self._draft.address)

    def validate_buyer_data(self) -> ValidationResult:
        errors: Dict[str, str] = {}
        if not self.is_valid_email():
            errors["email"] = ERR_EMAIL
        if not self.is_valid_phone():
            errors["phone"] = ERR_PHONE
        if not self.is_valid_address():
            errors["address"] = ERR_ADDRESS
        return ValidationResult(is_valid=not errors, errors=errors)

    def _emit_change(self) -> None:
        self._bus.emit(BuyerChanged(draft=self._draft))
