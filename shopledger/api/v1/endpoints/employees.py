from typing import List
from fastapi import APIRouter, Depends, Response, status
from shopledger.api.deps import get_directory, get_employee_service
from shopledger.schemas.employee import (
    EarningCreate,
    EmployeeBalanceResponse,
    EmployeeBalanceSummary,
    EmployeeDebtCreate,
    EmployeeEntryResponse,
    MarkDebtPaidRequest,
    UnpaidEarningsResponse,
)
from shopledger.schemas.party import EmployeeCreate, EmployeeResponse
from shopledger.services.directory_service import DirectoryService
from shopledger.services.employee_service import EmployeeLedgerService

router = APIRouter()

@router.post("/", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    employee_in: EmployeeCreate,
    directory: DirectoryService = Depends(get_directory)
):
    return await directory.create_employee(**employee_in.model_dump())

@router.get("/", response_model=List[EmployeeResponse])
async def list_employees(directory: DirectoryService = Depends(get_directory)):
    return await directory.list_employees()

@router.get("/summary", response_model=List[EmployeeBalanceSummary])
async def employee_summaries(ledger: EmployeeLedgerService = Depends(get_employee_service)):
    """Earnings, debts, settlements and balance per employee"""
    return await ledger.employee_summaries()

@router.post("/debts/{debt_id}/paid", response_model=EmployeeEntryResponse)
async def mark_debt_paid(
    debt_id: str,
    request: MarkDebtPaidRequest,
    ledger: EmployeeLedgerService = Depends(get_employee_service)
):
    """Record how an advance was recovered; the balance is unchanged"""
    return await ledger.mark_debt_paid(debt_id, request.method)

@router.get("/earnings/unpaid", response_model=List[EmployeeEntryResponse])
async def list_all_unpaid_earnings(ledger: EmployeeLedgerService = Depends(get_employee_service)):
    """Earnings not yet handed over, across all employees"""
    return await ledger.list_unpaid_earnings()

@router.post("/earnings/{earning_id}/paid", response_model=EmployeeEntryResponse)
async def mark_earning_paid(
    earning_id: str,
    ledger: EmployeeLedgerService = Depends(get_employee_service)
):
    """Record that an earning was handed over; the balance is unchanged"""
    return await ledger.mark_earning_paid(earning_id)

@router.delete("/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(
    entry_id: str,
    ledger: EmployeeLedgerService = Depends(get_employee_service)
):
    """Administrative removal of a ledger entry"""
    await ledger.delete_entry(entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: str,
    directory: DirectoryService = Depends(get_directory)
):
    return await directory.get_employee(employee_id)

@router.post(
    "/{employee_id}/earnings",
    response_model=EmployeeEntryResponse,
    status_code=status.HTTP_201_CREATED
)
async def add_earning(
    employee_id: str,
    earning_in: EarningCreate,
    ledger: EmployeeLedgerService = Depends(get_employee_service),
    directory: DirectoryService = Depends(get_directory)
):
    employee = await directory.get_employee(employee_id)
    return await ledger.add_earning(
        employee_id,
        earning_in.type,
        earning_in.description,
        earning_in.amount,
        employee_name=employee.name
    )

@router.post(
    "/{employee_id}/debts",
    response_model=EmployeeEntryResponse,
    status_code=status.HTTP_201_CREATED
)
async def add_debt(
    employee_id: str,
    debt_in: EmployeeDebtCreate,
    ledger: EmployeeLedgerService = Depends(get_employee_service),
    directory: DirectoryService = Depends(get_directory)
):
    """Record an advance taken by the employee"""
    employee = await directory.get_employee(employee_id)
    return await ledger.add_debt(
        employee_id,
        debt_in.description,
        debt_in.amount,
        employee_name=employee.name
    )

@router.get("/{employee_id}/entries", response_model=List[EmployeeEntryResponse])
async def list_entries(
    employee_id: str,
    ledger: EmployeeLedgerService = Depends(get_employee_service)
):
    """Earnings, debts and settlements, newest first"""
    return await ledger.list_entries(employee_id)

@router.get("/{employee_id}/balance", response_model=EmployeeBalanceResponse)
async def get_balance(
    employee_id: str,
    ledger: EmployeeLedgerService = Depends(get_employee_service)
):
    return EmployeeBalanceResponse(
        employee_id=employee_id,
        balance=await ledger.net_balance(employee_id)
    )

@router.get("/{employee_id}/unpaid-earnings", response_model=UnpaidEarningsResponse)
async def get_unpaid_earnings(
    employee_id: str,
    ledger: EmployeeLedgerService = Depends(get_employee_service)
):
    earnings = await ledger.list_unpaid_earnings(employee_id)
    return {
        "employee_id": employee_id,
        "total_unpaid": sum(earning.amount for earning in earnings),
        "earnings": earnings,
    }
