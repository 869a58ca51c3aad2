import logging
from datetime import datetime
from typing import Callable, Literal, Optional

from shopledger.core.config import settings
from shopledger.models.base import utcnow
from shopledger.models.employee import SettlementDirection, SettlementEntry
from shopledger.repositories.ledger_store import LedgerStore, RecordKind
from shopledger.services.employee_service import net_balance_of
from shopledger.services.locks import KeyedLock, employee_locks
from shopledger.utils.ledger_validation import InvalidAmount, NoBalance, validate_amount

logger = logging.getLogger(__name__)

SettlementPolicy = Literal["allow", "clamp", "reject"]

DEFAULT_DESCRIPTIONS = {
    SettlementDirection.ADMIN_TO_EMPLOYEE: "Salary payment to employee",
    SettlementDirection.EMPLOYEE_TO_ADMIN: "Debt repayment from employee",
}


class SettlementService:
    """Moves an employee's net balance toward zero."""

    def __init__(
        self,
        store: LedgerStore,
        clock: Callable[[], datetime] = utcnow,
        locks: KeyedLock = employee_locks,
        policy: Optional[SettlementPolicy] = None
    ):
        self.store = store
        self.clock = clock
        self.locks = locks
        self.policy = policy or settings.SETTLEMENT_POLICY

    async def settle(
        self,
        employee_id: str,
        amount: int,
        description: Optional[str] = None,
        policy: Optional[SettlementPolicy] = None,
        employee_name: str = ""
    ) -> SettlementEntry:
        """
        Record a settlement in the direction given by the balance sign.

        balance > 0: the shop pays the employee (admin_to_employee)
        balance < 0: the employee pays the shop (employee_to_admin)

        Raises InvalidAmount for non-positive amounts, NoBalance when
        the balance is zero. With policy "clamp" the amount is capped at
        abs(balance); with "reject" a larger amount raises InvalidAmount;
        with "allow" it is recorded as given and flips the balance sign.
        """
        amount = validate_amount(amount)
        policy = policy or self.policy

        async with self.locks.hold(employee_id):
            async with self.store.transaction() as tx:
                entries = await tx.list(RecordKind.EMPLOYEE_ENTRY, employee_id=employee_id)
                balance = net_balance_of(entries)
                if balance == 0:
                    logger.warning("Settlement refused: employee %s has no balance", employee_id)
                    raise NoBalance(f"Employee '{employee_id}' has a zero balance")

                direction = (
                    SettlementDirection.ADMIN_TO_EMPLOYEE if balance > 0
                    else SettlementDirection.EMPLOYEE_TO_ADMIN
                )

                if amount > abs(balance):
                    if policy == "clamp":
                        amount = abs(balance)
                    elif policy == "reject":
                        raise InvalidAmount(
                            f"Settlement {amount} exceeds balance {abs(balance)}"
                        )
                    else:
                        logger.warning(
                            "Settlement of %d exceeds balance %d of employee %s",
                            amount, balance, employee_id
                        )

                if not employee_name:
                    employee_name = next(
                        (e.employee_name for e in entries if e.employee_name), ""
                    )

                entry = SettlementEntry(
                    employee_id=employee_id,
                    employee_name=employee_name,
                    direction=direction,
                    amount=amount,
                    description=description or DEFAULT_DESCRIPTIONS[direction],
                    created_at=self.clock(),
                )
                await tx.put(RecordKind.EMPLOYEE_ENTRY, entry)

        logger.info(
            "Settlement %s for employee %s: %s amount=%d balance_before=%d",
            entry.id, employee_id, direction.value, amount, balance
        )
        return entry
