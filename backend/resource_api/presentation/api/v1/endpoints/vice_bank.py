"""Vice bank endpoints: users, deposits, purchases, purchase prices, tasks and
task deposits."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status

from resource_api.application.services import ViceBankService
from resource_api.infrastructure.dependencies import get_vice_bank_service
from resource_api.presentation.api.params import PageParams, page_params, require_param

router = APIRouter(prefix="/vice_bank", tags=["Vice Bank"])


# --- Users ---


@router.get("/users")
async def list_users(
    user_id: str | None = Query(None, alias="userId"),
    params: PageParams = Depends(page_params),
    service: ViceBankService = Depends(get_vice_bank_service),
) -> dict:
    """Vice bank users owned by ``userId``."""
    result = await service.get_users(
        require_param(user_id, "userId"), params.page, params.pagination
    )
    return {"users": [user.to_json() for user in result.items], "morePages": result.more_pages}


@router.get("/users/{vb_user_id}")
async def get_user(
    vb_user_id: str,
    service: ViceBankService = Depends(get_vice_bank_service),
) -> dict:
    user = await service.get_user(vb_user_id)
    return {"user": user.to_json()}


@router.post("/users", status_code=status.HTTP_201_CREATED)
async def add_user(
    raw: Any = Body(None),
    service: ViceBankService = Depends(get_vice_bank_service),
) -> dict:
    user = await service.add_user(raw)
    return {"user": user.to_json()}


@router.put("/users/{vb_user_id}")
async def update_user(
    vb_user_id: str,
    raw: Any = Body(None),
    service: ViceBankService = Depends(get_vice_bank_service),
) -> dict:
    user = await service.update_user(vb_user_id, raw)
    return {"user": user.to_json()}


@router.delete("/users/{vb_user_id}")
async def delete_user(
    vb_user_id: str,
    service: ViceBankService = Depends(get_vice_bank_service),
) -> dict:
    user = await service.delete_user(vb_user_id)
    return {"user": user.to_json()}


# --- Deposits ---


@router.get("/deposits")
async def list_deposits(
    vb_user_id: str | None = Query(None, alias="vbUserId"),
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    params: PageParams = Depends(page_params),
    service: ViceBankService = Depends(get_vice_bank_service),
) -> dict:
    """One user's deposits, optionally limited to ``startDate``..``endDate``."""
    result = await service.get_deposits(
        require_param(vb_user_id, "vbUserId"),
        params.page,
        params.pagination,
        start_date=start_date,
        end_date=end_date,
    )
    return {
        "deposits": [deposit.to_json() for deposit in result.items],
        "morePages": result.more_pages,
    }


@router.post("/deposits", status_code=status.HTTP_201_CREATED)
async def add_deposit(
    raw: Any = Body(None),
    service: ViceBankService = Depends(get_vice_bank_service),
) -> dict:
    """Record a deposit; the response carries the user's new token balance."""
    deposit, current_tokens = await service.add_deposit(raw)
    return {"deposit": deposit.to_json(), "currentTokens": current_tokens}


@router.put("/deposits/{deposit_id}")
async def update_deposit(
    deposit_id: str,
    raw: Any = Body(None),
    service: ViceBankService = Depends(get_vice_bank_service),
) -> dict:
    deposit = await service.update_deposit(deposit_id, raw)
    return {"deposit": deposit.to_json()}


@router.delete("/deposits/{deposit_id}")
async def delete_deposit(
    deposit_id: str,
    service: ViceBankService = Depends(get_vice_bank_service),
) -> dict:
    deposit = await service.delete_deposit(deposit_id)
    return {"deposit": deposit.to_json()}


# --- Purchases ---


@router.get("/purchases")
async def list_purchases(
    vb_user_id: str | None = Query(None, alias="vbUserId"),
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    params: PageParams = Depends(page_params),
    service: ViceBankService = Depends(get_vice_bank_service),
) -> dict:
    result = await service.get_purchases(
        require_param(vb_user_id, "vbUserId"),
        params.page,
        params.pagination,
        start_date=start_date,
        end_date=end_date,
    )
    return {
        "purchases": [purchase.to_json() for purchase in result.items],
        "morePages": result.more_pages,
    }


@router.post("/purchases", status_code=status.HTTP_201_CREATED)
async def add_purchase(
    raw: Any = Body(None),
    service: ViceBankService = Depends(get_vice_bank_service),
) -> dict:
    purchase, current_tokens = await service.add_purchase(raw)
    return {"purchase": purchase.to_json(), "currentTokens": current_tokens}


@router.put("/purchases/{purchase_id}")
async def update_purchase(
    purchase_id: str,
    raw: Any = Body(None),
    service: ViceBankService = Depends(get_vice_bank_service),
) -> dict:
    purchase = await service.update_purchase(purchase_id, raw)
    return {"purchase": purchase.to_json()}


@router.delete("/purchases/{purchase_id}")
async def delete_purchase(
    purchase_id: str,
    service: ViceBankService = Depends(get_vice_bank_service),
) -> dict:
    purchase = await service.delete_purchase(purchase_id)
    return {"purchase": purchase.to_json()}


# --- Purchase prices ---


@router.get("/purchase_prices")
async def list_purchase_prices(
    vb_user_id: str | None = Query(None, alias="vbUserId"),
    params: PageParams = Depends(page_params),
    service: ViceBankService = Depends(get_vice_bank_service),
) -> dict:
    result = await service.get_purchase_prices(
        require_param(vb_user_id, "vbUserId"), params.page, params.pagination
    )
    return {
        "purchasePrices": [price.to_json() for price in result.items],
        "morePages": result.more_pages,
    }


@router.post("/purchase_prices", status_code=status.HTTP_201_CREATED)
async def add_purchase_price(
    raw: Any = Body(None),
    service: ViceBankService = Depends(get_vice_bank_service),
) -> dict:
    price = await service.add_purchase_price(raw)
    return {"purchasePrice": price.to_json()}


@router.put("/purchase_prices/{price_id}")
async def update_purchase_price(
    price_id: str,
    raw: Any = Body(None),
    service: ViceBankService = Depends(get_vice_bank_service),
) -> dict:
    price = await service.update_purchase_price(price_id, raw)
    return {"purchasePrice": price.to_json()}


@router.delete("/purchase_prices/{price_id}")
async def delete_purchase_price(
    price_id: str,
    service: ViceBankService = Depends(get_vice_bank_service),
) -> dict:
    price = await service.delete_purchase_price(price_id)
    return {"purchasePrice": price.to_json()}


# --- Tasks ---


@router.get("/tasks")
async def list_tasks(
    vb_user_id: str | None = Query(None, alias="vbUserId"),
    params: PageParams = Depends(page_params),
    service: ViceBankService = Depends(get_vice_bank_service),
) -> dict:
    result = await service.get_tasks(
        require_param(vb_user_id, "vbUserId"), params.page, params.pagination
    )
    return {"tasks": [task.to_json() for task in result.items], "morePages": result.more_pages}


@router.post("/tasks", status_code=status.HTTP_201_CREATED)
async def add_task(
    raw: Any = Body(None),
    service: ViceBankService = Depends(get_vice_bank_service),
) -> dict:
    task = await service.add_task(raw)
    return {"task": task.to_json()}


@router.put("/tasks/{task_id}")
async def update_task(
    task_id: str,
    raw: Any = Body(None),
    service: ViceBankService = Depends(get_vice_bank_service),
) -> dict:
    task = await service.update_task(task_id, raw)
    return {"task": task.to_json()}


@router.delete("/tasks/{task_id}")
async def delete_task(
    task_id: str,
    service: ViceBankService = Depends(get_vice_bank_service),
) -> dict:
    task = await service.delete_task(task_id)
    return {"task": task.to_json()}


# --- Task deposits ---


@router.get("/task_deposits")
async def list_task_deposits(
    vb_user_id: str | None = Query(None, alias="vbUserId"),
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    task_id: str | None = Query(None, alias="taskId"),
    params: PageParams = Depends(page_params),
    service: ViceBankService = Depends(get_vice_bank_service),
) -> dict:
    """One user's task deposits, optionally for one ``taskId`` and date range."""
    result = await service.get_task_deposits(
        require_param(vb_user_id, "vbUserId"),
        params.page,
        params.pagination,
        start_date=start_date,
        end_date=end_date,
        task_id=task_id,
    )
    return {
        "taskDeposits": [deposit.to_json() for deposit in result.items],
        "morePages": result.more_pages,
    }


@router.post("/task_deposits", status_code=status.HTTP_201_CREATED)
async def add_task_deposit(
    raw: Any = Body(None),
    service: ViceBankService = Depends(get_vice_bank_service),
) -> dict:
    deposit, current_tokens = await service.add_task_deposit(raw)
    return {"taskDeposit": deposit.to_json(), "currentTokens": current_tokens}


@router.put("/task_deposits/{deposit_id}")
async def update_task_deposit(
    deposit_id: str,
    raw: Any = Body(None),
    service: ViceBankService = Depends(get_vice_bank_service),
) -> dict:
    deposit, current_tokens = await service.update_task_deposit(deposit_id, raw)
    return {"taskDeposit": deposit.to_json(), "currentTokens": current_tokens}


@router.delete("/task_deposits/{deposit_id}")
async def delete_task_deposit(
    deposit_id: str,
    service: ViceBankService = Depends(get_vice_bank_service),
) -> dict:
    deposit, current_tokens = await service.delete_task_deposit(deposit_id)
    return {"taskDeposit": deposit.to_json(), "currentTokens": current_tokens}
