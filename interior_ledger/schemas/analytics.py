# interior_ledger/schemas/analytics.py
from typing import Dict, List, Optional
from pydantic import BaseModel
from datetime import datetime
import uuid
from interior_ledger.models.enums import EntryType

class BalanceSummary(BaseModel):
    total_income: float
    recognized_income: float
    total_expenses: float
    net_balance: float
    remaining_budget: float
    currency: str
    last_updated: datetime

class MonthlyBreakdownItem(BaseModel):
    month: int
    income: float
    expenses: float
    balance: float

class YearlyBreakdownItem(BaseModel):
    year: int
    income: float
    expenses: float
    balance: float

class CategoryTotal(BaseModel):
    category: str
    total: float

class TypeTotal(BaseModel):
    type: EntryType
    total: float

class MonthTotal(BaseModel):
    year: int
    month: int
    total: float

class MonthTypeTotal(MonthTotal):
    type: EntryType

class UserMonthlyItem(BaseModel):
    year: int
    month: int
    income: float
    expenses: float
    balance: float

class RecentTransaction(BaseModel):
    id: uuid.UUID
    type: EntryType
    amount: float
    category: str
    description: Optional[str] = None
    date: datetime
    project_id: uuid.UUID
    project_name: str

class UserTotalsSummary(BaseModel):
    total_projects: int
    total_income: float
    total_expenses: float
    net_balance: float

class UserTotals(BaseModel):
    summary: UserTotalsSummary
    income_by_category: Dict[str, float]
    expenses_by_category: Dict[str, float]
    monthly_breakdown: List[UserMonthlyItem]
    recent_transactions: List[RecentTransaction]
