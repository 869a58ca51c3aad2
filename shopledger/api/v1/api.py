from fastapi import APIRouter
from shopledger.api.v1.endpoints import customers, debts, employees, settlements

api_router = APIRouter()

api_router.include_router(customers.router, prefix="/customers", tags=["customers"])
api_router.include_router(debts.router, prefix="/debts", tags=["debts"])
api_router.include_router(employees.router, prefix="/employees", tags=["employees"])
api_router.include_router(settlements.router, prefix="/settlements", tags=["settlements"])
