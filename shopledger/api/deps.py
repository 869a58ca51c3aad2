from fastapi import Depends

from shopledger.db.session import get_store
from shopledger.repositories.ledger_store import LedgerStore
from shopledger.services.debt_service import DebtLedgerService
from shopledger.services.directory_service import DirectoryService
from shopledger.services.employee_service import EmployeeLedgerService
from shopledger.services.payment_service import PaymentService
from shopledger.services.settlement_service import SettlementService


def get_directory(store: LedgerStore = Depends(get_store)) -> DirectoryService:
    return DirectoryService(store)


def get_debt_service(store: LedgerStore = Depends(get_store)) -> DebtLedgerService:
    return DebtLedgerService(store)


def get_payment_service(store: LedgerStore = Depends(get_store)) -> PaymentService:
    return PaymentService(store)


def get_employee_service(store: LedgerStore = Depends(get_store)) -> EmployeeLedgerService:
    return EmployeeLedgerService(store)


def get_settlement_service(store: LedgerStore = Depends(get_store)) -> SettlementService:
    return SettlementService(store)
