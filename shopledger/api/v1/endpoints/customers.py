from typing import List
from fastapi import APIRouter, Depends, status
from shopledger.api.deps import get_debt_service, get_directory, get_payment_service
from shopledger.schemas.debt import (
    CustomerBalanceResponse,
    CustomerDebtSummary,
    DebtResponse,
    PaymentCreate,
    PaymentResponse,
    PaymentResultResponse,
)
from shopledger.schemas.party import CustomerCreate, CustomerResponse, CustomerUpdate
from shopledger.services.debt_service import DebtLedgerService
from shopledger.services.directory_service import DirectoryService
from shopledger.services.payment_service import PaymentService

router = APIRouter()

@router.post("/", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def create_customer(
    customer_in: CustomerCreate,
    directory: DirectoryService = Depends(get_directory)
):
    """Register a customer"""
    return await directory.create_customer(**customer_in.model_dump())

@router.get("/", response_model=List[CustomerResponse])
async def list_customers(directory: DirectoryService = Depends(get_directory)):
    """List customers by name"""
    return await directory.list_customers()

@router.get("/with-debt", response_model=List[CustomerDebtSummary])
async def customers_with_debt(debts: DebtLedgerService = Depends(get_debt_service)):
    """Customers that still owe something, largest debt first"""
    return await debts.customers_with_debt()

@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(
    customer_id: str,
    directory: DirectoryService = Depends(get_directory)
):
    return await directory.get_customer(customer_id)

@router.patch("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    customer_id: str,
    customer_in: CustomerUpdate,
    directory: DirectoryService = Depends(get_directory)
):
    return await directory.update_customer(
        customer_id, **customer_in.model_dump(exclude_unset=True)
    )

@router.get("/{customer_id}/debts", response_model=List[DebtResponse])
async def list_customer_debts(
    customer_id: str,
    debts: DebtLedgerService = Depends(get_debt_service)
):
    """All debts of a customer, newest first"""
    return await debts.list_debts(customer_id)

@router.get("/{customer_id}/balance", response_model=CustomerBalanceResponse)
async def get_customer_balance(
    customer_id: str,
    debts: DebtLedgerService = Depends(get_debt_service)
):
    """Outstanding balance, recomputed from the customer's debts"""
    outstanding = await debts.outstanding_debts_oldest_first(customer_id)
    return CustomerBalanceResponse(
        customer_id=customer_id,
        outstanding=sum(debt.remaining_amount for debt in outstanding),
        debt_count=len(outstanding)
    )

@router.post("/{customer_id}/payments", response_model=PaymentResultResponse)
async def pay_customer(
    customer_id: str,
    payment_in: PaymentCreate,
    payments: PaymentService = Depends(get_payment_service)
):
    """Apply one payment to the customer's debts, oldest first"""
    return await payments.pay_customer(customer_id, payment_in.amount)

@router.get("/{customer_id}/payments", response_model=List[PaymentResponse])
async def list_customer_payments(
    customer_id: str,
    payments: PaymentService = Depends(get_payment_service)
):
    return await payments.list_customer_payments(customer_id)
