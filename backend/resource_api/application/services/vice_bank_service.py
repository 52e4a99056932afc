"""Application service for the vice bank token economy.

Deposits earn tokens for a vice bank user and purchases spend them; both
adjust the user's ``currentTokens`` as they are recorded.
"""

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Any, TypeVar

from resource_api.application.interfaces import DEFAULT_PAGE, EntityStore, Page
from resource_api.domain.entities import (
    Deposit,
    Entity,
    Frequency,
    Purchase,
    PurchasePrice,
    Task,
    TaskDeposit,
    ViceBankUser,
)
from resource_api.domain.exceptions import InvalidInputError
from resource_api.domain.validation import parse_datetime

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Entity)

_LATEST = datetime.max.replace(tzinfo=timezone.utc)


def _parse_optional_date(value: str | None) -> datetime | None:
    return parse_datetime(value) if value else None


def owned_by(vb_user_id: str) -> Callable[[Any], bool]:
    return lambda entity: entity.vb_user_id == vb_user_id


def dated_between(
    vb_user_id: str,
    start_date: str | None = None,
    end_date: str | None = None,
) -> Callable[[Any], bool]:
    """Filter for one user's dated records. Unparsable bounds are ignored."""
    start = _parse_optional_date(start_date)
    end = _parse_optional_date(end_date)

    def matches(entity: Any) -> bool:
        if entity.vb_user_id != vb_user_id:
            return False
        if start is not None and entity.date < start:
            return False
        if end is not None and entity.date > end:
            return False
        return True

    return matches


def frequency_period(moment: datetime, frequency: Frequency) -> tuple[datetime, datetime]:
    """The UTC day, week (Monday first) or month containing ``moment``, as [start, end)."""
    day = moment.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    if frequency is Frequency.DAY:
        start, days = day, 1
    elif frequency is Frequency.WEEK:
        start, days = day - timedelta(days=day.weekday()), 7
    else:
        start = day.replace(day=1)
        days = 32

    try:
        end = start + timedelta(days=days)
    except OverflowError:
        return start, _LATEST
    if frequency is Frequency.MONTH:
        end = end.replace(day=1)
    return start, end


class ViceBankService:
    """Orchestrates vice bank users and their deposits, purchases, prices, tasks
    and task deposits."""

    def __init__(
        self,
        users: EntityStore[ViceBankUser],
        deposits: EntityStore[Deposit],
        purchases: EntityStore[Purchase],
        purchase_prices: EntityStore[PurchasePrice],
        tasks: EntityStore[Task],
        task_deposits: EntityStore[TaskDeposit],
    ):
        self._users = users
        self._deposits = deposits
        self._purchases = purchases
        self._purchase_prices = purchase_prices
        self._tasks = tasks
        self._task_deposits = task_deposits

    # --- Users ---

    async def get_users(
        self,
        user_id: str,
        page: int = DEFAULT_PAGE,
        pagination: int | None = None,
    ) -> Page[ViceBankUser]:
        return await self._users.get_list(
            page=page, page_size=pagination, where=lambda u: u.user_id == user_id
        )

    async def get_user(self, vb_user_id: str) -> ViceBankUser:
        return await self._users.get_by_key(vb_user_id)

    async def add_user(self, raw: Any) -> ViceBankUser:
        return await self._users.add(raw)

    async def update_user(self, vb_user_id: str, raw: Any) -> ViceBankUser:
        return await self._update(self._users, vb_user_id, raw)

    async def delete_user(self, vb_user_id: str) -> ViceBankUser:
        return await self._users.delete(vb_user_id)

    # --- Deposits ---

    async def get_deposits(
        self,
        vb_user_id: str,
        page: int = DEFAULT_PAGE,
        pagination: int | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> Page[Deposit]:
        return await self._deposits.get_list(
            page=page,
            page_size=pagination,
            where=dated_between(vb_user_id, start_date, end_date),
        )

    async def add_deposit(self, raw: Any) -> tuple[Deposit, float]:
        """Record a deposit and credit its tokens to the owning user.

        Returns the deposit and the user's new token balance.
        """
        Deposit.ensure_valid_new(raw)
        user = await self._users.get_by_key(raw["vbUserId"])

        deposit = await self._deposits.add(raw)
        user = await self._adjust_tokens(user.id, deposit.tokens_earned)
        return deposit, user.current_tokens

    async def update_deposit(self, deposit_id: str, raw: Any) -> Deposit:
        return await self._update(self._deposits, deposit_id, raw)

    async def delete_deposit(self, deposit_id: str) -> Deposit:
        return await self._deposits.delete(deposit_id)

    # --- Purchases ---

    async def get_purchases(
        self,
        vb_user_id: str,
        page: int = DEFAULT_PAGE,
        pagination: int | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> Page[Purchase]:
        return await self._purchases.get_list(
            page=page,
            page_size=pagination,
            where=dated_between(vb_user_id, start_date, end_date),
        )

    async def add_purchase(self, raw: Any) -> tuple[Purchase, float]:
        """Record a purchase and debit its tokens from the owning user."""
        Purchase.ensure_valid_new(raw)
        user = await self._users.get_by_key(raw["vbUserId"])

        purchase = await self._purchases.add(raw)
        user = await self._adjust_tokens(user.id, -purchase.tokens_spent)
        return purchase, user.current_tokens

    async def update_purchase(self, purchase_id: str, raw: Any) -> Purchase:
        return await self._update(self._purchases, purchase_id, raw)

    async def delete_purchase(self, purchase_id: str) -> Purchase:
        return await self._purchases.delete(purchase_id)

    # --- Purchase prices ---

    async def get_purchase_prices(
        self,
        vb_user_id: str,
        page: int = DEFAULT_PAGE,
        pagination: int | None = None,
    ) -> Page[PurchasePrice]:
        return await self._purchase_prices.get_list(
            page=page, page_size=pagination, where=owned_by(vb_user_id)
        )

    async def add_purchase_price(self, raw: Any) -> PurchasePrice:
        return await self._purchase_prices.add(raw)

    async def update_purchase_price(self, price_id: str, raw: Any) -> PurchasePrice:
        return await self._update(self._purchase_prices, price_id, raw)

    async def delete_purchase_price(self, price_id: str) -> PurchasePrice:
        return await self._purchase_prices.delete(price_id)

    # --- Tasks ---

    async def get_tasks(
        self,
        vb_user_id: str,
        page: int = DEFAULT_PAGE,
        pagination: int | None = None,
    ) -> Page[Task]:
        return await self._tasks.get_list(
            page=page, page_size=pagination, where=owned_by(vb_user_id)
        )

    async def add_task(self, raw: Any) -> Task:
        return await self._tasks.add(raw)

    async def update_task(self, task_id: str, raw: Any) -> Task:
        return await self._update(self._tasks, task_id, raw)

    async def delete_task(self, task_id: str) -> Task:
        return await self._tasks.delete(task_id)

    # --- Task deposits ---

    async def get_task_deposits(
        self,
        vb_user_id: str,
        page: int = DEFAULT_PAGE,
        pagination: int | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        task_id: str | None = None,
    ) -> Page[TaskDeposit]:
        in_range = dated_between(vb_user_id, start_date, end_date)
        return await self._task_deposits.get_list(
            page=page,
            page_size=pagination,
            where=lambda d: in_range(d) and (task_id is None or d.task_id == task_id),
        )

    async def add_task_deposit(self, raw: Any) -> tuple[TaskDeposit, float]:
        """Record a completed task and credit its tokens to the owning user.

        Only the first deposit for a task in each period of its frequency earns
        tokens; later ones in the same period are stored with ``tokensEarned`` 0.
        """
        TaskDeposit.ensure_valid_new(raw)
        user = await self._users.get_by_key(raw["vbUserId"])
        task = await self._tasks.get_by_key(raw["taskId"])

        if await self._period_taken(task, user.id, parse_datetime(raw["date"])):
            raw = {**raw, "tokensEarned": 0}
        deposit = await self._task_deposits.add(raw)
        user = await self._adjust_tokens(user.id, deposit.tokens_earned)
        return deposit, user.current_tokens

    async def update_task_deposit(self, deposit_id: str, raw: Any) -> tuple[TaskDeposit, float]:
        """Apply changes and move the user's balance by the change in ``tokensEarned``."""
        existing = await self._task_deposits.get_by_key(deposit_id)
        updated = existing.with_json(raw)
        if updated.vb_user_id != existing.vb_user_id:
            raise InvalidInputError("A task deposit cannot change owner", ["vbUserId"])

        user = await self._users.get_by_key(existing.vb_user_id)
        task = await self._tasks.get_by_key(updated.task_id)
        if await self._period_taken(task, user.id, updated.date, exclude_id=updated.id):
            updated = replace(updated, tokens_earned=0)

        updated = await self._task_deposits.update(updated)
        user = await self._adjust_tokens(user.id, updated.tokens_earned - existing.tokens_earned)
        return updated, user.current_tokens

    async def delete_task_deposit(self, deposit_id: str) -> tuple[TaskDeposit, float]:
        """Delete a task deposit and take back the tokens it earned."""
        existing = await self._task_deposits.get_by_key(deposit_id)
        user = await self._users.get_by_key(existing.vb_user_id)

        deposit = await self._task_deposits.delete(deposit_id)
        user = await self._adjust_tokens(user.id, -deposit.tokens_earned)
        return deposit, user.current_tokens

    # --- Helpers ---

    @staticmethod
    async def _update(store: EntityStore[E], key: str, raw: Any) -> E:
        existing = await store.get_by_key(key)
        return await store.update(existing.with_json(raw))

    async def _adjust_tokens(self, vb_user_id: str, delta: float) -> ViceBankUser:
        user = await self._users.get_by_key(vb_user_id)
        updated = replace(user, current_tokens=user.current_tokens + delta)
        await self._users.update(updated)
        logger.debug(
            "Vice bank user '%s' balance %s -> %s",
            user.id,
            user.current_tokens,
            updated.current_tokens,
        )
        return updated

    async def _period_taken(
        self,
        task: Task,
        vb_user_id: str,
        moment: datetime,
        exclude_id: str | None = None,
    ) -> bool:
        start, end = frequency_period(moment, task.frequency)
        return (
            await self._task_deposits.count(
                where=lambda d: d.id != exclude_id
                and d.vb_user_id == vb_user_id
                and d.task_id == task.id
                and start <= d.date < end
            )
            > 0
        )
