from fastapi import APIRouter, Depends, status
from shopledger.api.deps import get_directory, get_settlement_service
from shopledger.schemas.employee import EmployeeEntryResponse, SettlementCreate
from shopledger.services.directory_service import DirectoryService
from shopledger.services.settlement_service import SettlementService

router = APIRouter()

@router.post(
    "/{employee_id}",
    response_model=EmployeeEntryResponse,
    status_code=status.HTTP_201_CREATED
)
async def create_settlement(
    employee_id: str,
    settlement_in: SettlementCreate,
    settlements: SettlementService = Depends(get_settlement_service),
    directory: DirectoryService = Depends(get_directory)
):
    """Move the employee's balance toward zero"""
    employee = await directory.get_employee(employee_id)
    return await settlements.settle(
        employee_id,
        settlement_in.amount,
        description=settlement_in.description,
        policy=settlement_in.policy,
        employee_name=employee.name
    )
