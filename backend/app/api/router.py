"""
Main API router.
"""

from fastapi import APIRouter
from app.api import categories, tasks, expenses, reminders

api_router = APIRouter()

api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(tasks.router)
api_router.include_router(reminders.router)
api_router.include_router(expenses.router)
