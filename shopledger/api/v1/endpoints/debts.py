from typing import List
from fastapi import APIRouter, Depends, Response, status
from shopledger.api.deps import get_debt_service, get_directory, get_payment_service
from shopledger.schemas.debt import (
    DebtCreate,
    DebtResponse,
    PaymentCreate,
    PaymentResponse,
    PaymentResultResponse,
)
from shopledger.services.debt_service import DebtLedgerService
from shopledger.services.directory_service import DirectoryService
from shopledger.services.payment_service import PaymentService

router = APIRouter()

@router.post("/", response_model=DebtResponse, status_code=status.HTTP_201_CREATED)
async def create_debt(
    debt_in: DebtCreate,
    debts: DebtLedgerService = Depends(get_debt_service),
    directory: DirectoryService = Depends(get_directory)
):
    """Record a sale on credit"""
    customer_name = debt_in.customer_name
    if customer_name is None:
        customer = await directory.get_customer(debt_in.customer_id)
        customer_name = customer.name

    return await debts.create_debt(
        customer_id=debt_in.customer_id,
        customer_name=customer_name,
        items=[item.to_item() for item in debt_in.items],
        total=debt_in.total
    )

@router.get("/", response_model=List[DebtResponse])
async def list_debts(
    unpaid_only: bool = False,
    debts: DebtLedgerService = Depends(get_debt_service)
):
    """All debts, newest first"""
    if unpaid_only:
        return await debts.list_unpaid_debts()
    return await debts.list_debts()

@router.get("/{debt_id}", response_model=DebtResponse)
async def get_debt(
    debt_id: str,
    debts: DebtLedgerService = Depends(get_debt_service)
):
    return await debts.get_debt(debt_id)

@router.delete("/{debt_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_debt(
    debt_id: str,
    debts: DebtLedgerService = Depends(get_debt_service)
):
    """Administrative removal of a debt"""
    await debts.delete_debt(debt_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.post("/{debt_id}/payments", response_model=PaymentResultResponse)
async def pay_debt(
    debt_id: str,
    payment_in: PaymentCreate,
    payments: PaymentService = Depends(get_payment_service)
):
    """Pay one debt directly"""
    return await payments.pay_debt(debt_id, payment_in.amount)

@router.get("/{debt_id}/payments", response_model=List[PaymentResponse])
async def list_debt_payments(
    debt_id: str,
    payments: PaymentService = Depends(get_payment_service)
):
    return await payments.list_debt_payments(debt_id)
