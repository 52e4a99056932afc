"""Vice bank entities: a token economy where tasks and deposits earn tokens
and purchases spend them."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar

from resource_api.domain.entities.base import Entity
from resource_api.domain.validation import (
    Field,
    format_datetime,
    is_number,
    is_string,
    is_valid_date_string,
    one_of,
    parse_datetime,
)


class Frequency(str, Enum):
    """How often a task can be completed."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


@dataclass(frozen=True)
class ViceBankUser(Entity):
    """A vice bank account owned by an application user."""

    user_id: str
    name: str
    current_tokens: float = 0

    entity_type: ClassVar[str] = "Vice Bank User"
    schema: ClassVar[tuple[Field, ...]] = (
        Field("userId", is_string),
        Field("name", is_string),
        Field("currentTokens", is_number),
    )
    defaulted_on_create: ClassVar[frozenset[str]] = frozenset({"currentTokens"})

    @property
    def sort_name(self) -> str:
        return self.name

    @classmethod
    def _from_valid_json(cls, raw: dict[str, Any]) -> "ViceBankUser":
        return cls(
            id=raw["id"],
            user_id=raw["userId"],
            name=raw["name"],
            current_tokens=raw.get("currentTokens", 0),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.name,
            "currentTokens": self.current_tokens,
        }


@dataclass(frozen=True)
class Deposit(Entity):
    """A recorded deposit of some activity, converted into tokens."""

    vb_user_id: str
    date: datetime
    deposit_quantity: float
    conversion_rate: float
    deposit_conversion_name: str
    conversion_unit: str

    entity_type: ClassVar[str] = "Deposit"
    schema: ClassVar[tuple[Field, ...]] = (
        Field("vbUserId", is_string),
        Field("date", is_valid_date_string),
        Field("depositQuantity", is_number),
        Field("conversionRate", is_number),
        Field("depositConversionName", is_string),
        Field("conversionUnit", is_string),
    )

    @property
    def tokens_earned(self) -> float:
        return self.deposit_quantity * self.conversion_rate

    @property
    def sort_date(self) -> datetime:
        return self.date

    @property
    def sort_name(self) -> str:
        return self.deposit_conversion_name

    @classmethod
    def _from_valid_json(cls, raw: dict[str, Any]) -> "Deposit":
        return cls(
            id=raw["id"],
            vb_user_id=raw["vbUserId"],
            date=parse_datetime(raw["date"]),
            deposit_quantity=raw["depositQuantity"],
            conversion_rate=raw["conversionRate"],
            deposit_conversion_name=raw["depositConversionName"],
            conversion_unit=raw["conversionUnit"],
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "vbUserId": self.vb_user_id,
            "date": format_datetime(self.date),
            "depositQuantity": self.deposit_quantity,
            "conversionRate": self.conversion_rate,
            "depositConversionName": self.deposit_conversion_name,
            "conversionUnit": self.conversion_unit,
            # derived, ignored on input
            "tokensEarned": self.tokens_earned,
        }


@dataclass(frozen=True)
class Purchase(Entity):
    """Tokens spent on something priced by a ``PurchasePrice``."""

    vb_user_id: str
    purchase_price_id: str
    purchased_name: str
    date: datetime
    purchased_quantity: float
    tokens_spent: float

    entity_type: ClassVar[str] = "Purchase"
    schema: ClassVar[tuple[Field, ...]] = (
        Field("vbUserId", is_string),
        Field("purchasePriceId", is_string),
        Field("purchasedName", is_string),
        Field("date", is_valid_date_string),
        Field("purchasedQuantity", is_number),
        Field("tokensSpent", is_number),
    )

    @property
    def sort_date(self) -> datetime:
        return self.date

    @property
    def sort_name(self) -> str:
        return self.purchased_name

    @classmethod
    def _from_valid_json(cls, raw: dict[str, Any]) -> "Purchase":
        return cls(
            id=raw["id"],
            vb_user_id=raw["vbUserId"],
            purchase_price_id=raw["purchasePriceId"],
            purchased_name=raw["purchasedName"],
            date=parse_datetime(raw["date"]),
            purchased_quantity=raw["purchasedQuantity"],
            tokens_spent=raw["tokensSpent"],
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "vbUserId": self.vb_user_id,
            "purchasePriceId": self.purchase_price_id,
            "purchasedName": self.purchased_name,
            "date": format_datetime(self.date),
            "purchasedQuantity": self.purchased_quantity,
            "tokensSpent": self.tokens_spent,
        }


@dataclass(frozen=True)
class PurchasePrice(Entity):
    """The token price of one unit of a purchasable item."""

    vb_user_id: str
    name: str
    price: float

    entity_type: ClassVar[str] = "Purchase Price"
    schema: ClassVar[tuple[Field, ...]] = (
        Field("vbUserId", is_string),
        Field("name", is_string),
        Field("price", is_number),
    )

    @property
    def sort_name(self) -> str:
        return self.name

    @classmethod
    def _from_valid_json(cls, raw: dict[str, Any]) -> "PurchasePrice":
        return cls(
            id=raw["id"],
            vb_user_id=raw["vbUserId"],
            name=raw["name"],
            price=raw["price"],
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "vbUserId": self.vb_user_id,
            "name": self.name,
            "price": self.price,
        }


@dataclass(frozen=True)
class Task(Entity):
    """A repeatable task that earns a fixed number of tokens."""

    vb_user_id: str
    name: str
    frequency: Frequency
    tokens_per: float

    entity_type: ClassVar[str] = "Task"
    schema: ClassVar[tuple[Field, ...]] = (
        Field("vbUserId", is_string),
        Field("name", is_string),
        Field("frequency", one_of(*(f.value for f in Frequency), case_sensitive=False)),
        Field("tokensPer", is_number),
    )

    @property
    def sort_name(self) -> str:
        return self.name

    @classmethod
    def _from_valid_json(cls, raw: dict[str, Any]) -> "Task":
        return cls(
            id=raw["id"],
            vb_user_id=raw["vbUserId"],
            name=raw["name"],
            frequency=Frequency(raw["frequency"].lower()),
            tokens_per=raw["tokensPer"],
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "vbUserId": self.vb_user_id,
            "name": self.name,
            "frequency": self.frequency.value,
            "tokensPer": self.tokens_per,
        }


@dataclass(frozen=True)
class TaskDeposit(Entity):
    """One completion of a ``Task``, crediting its tokens to the user."""

    vb_user_id: str
    date: datetime
    task_name: str
    task_id: str
    tokens_earned: float

    entity_type: ClassVar[str] = "Task Deposit"
    schema: ClassVar[tuple[Field, ...]] = (
        Field("vbUserId", is_string),
        Field("date", is_valid_date_string),
        Field("taskName", is_string),
        Field("taskId", is_string),
        Field("tokensEarned", is_number),
    )

    @property
    def sort_date(self) -> datetime:
        return self.date

    @property
    def sort_name(self) -> str:
        return self.task_name

    @classmethod
    def _from_valid_json(cls, raw: dict[str, Any]) -> "TaskDeposit":
        return cls(
            id=raw["id"],
            vb_user_id=raw["vbUserId"],
            date=parse_datetime(raw["date"]),
            task_name=raw["taskName"],
            task_id=raw["taskId"],
            tokens_earned=raw["tokensEarned"],
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "vbUserId": self.vb_user_id,
            "date": format_datetime(self.date),
            "taskName": self.task_name,
            "taskId": self.task_id,
            "tokensEarned": self.tokens_earned,
        }
