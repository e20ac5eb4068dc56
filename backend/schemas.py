from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from typing import Optional

from utils.splits import SPLIT_TYPES, SPLIT_EQUAL
from utils.personal import CATEGORY_NAMES, DEFAULT_CATEGORY


class UserBase(BaseModel):
    email: EmailStr
    full_name: Optional[str] = None

class UserCreate(UserBase):
    password: str

class User(UserBase):
    id: int
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class Token(BaseModel):
    access_token: str
    token_type: str
    refresh_token: Optional[str] = None

class RefreshTokenRequest(BaseModel):
    refresh_token: str

class ForgotPasswordRequest(BaseModel):
    email: EmailStr

class ResetPasswordRequest(BaseModel):
    token: str
    new_password: str

class PasswordChangeRequest(BaseModel):
    current_password: str
    new_password: str


class GroupBase(BaseModel):
    name: str
    description: Optional[str] = None

class GroupCreate(GroupBase):
    pass

class GroupUpdate(GroupBase):
    pass

class Group(GroupBase):
    id: int
    created_by_id: int

    model_config = ConfigDict(from_attributes=True)

class GroupSummary(Group):
    """Group as shown in the listing, with counts and the caller's balance."""
    participant_count: int
    expense_count: int
    balance: int


class ParticipantCreate(BaseModel):
    name: str

class Participant(BaseModel):
    id: int
    group_id: int
    name: str
    user_id: Optional[int] = None  # None for placeholder participants

    model_config = ConfigDict(from_attributes=True)

class GroupWithParticipants(Group):
    participants: list[Participant]


class ExpenseBase(BaseModel):
    title: str
    amount: int  # In cents
    date: Optional[str] = None  # YYYY-MM-DD, defaults to today
    payer_id: int
    split_type: str = SPLIT_EQUAL  # equal | manual
    participant_ids: list[int]
    manual_values: Optional[dict[int, int]] = None  # participant_id -> cents, manual only

    @field_validator('split_type')
    @classmethod
    def validate_split_type(cls, v):
        v = v.lower()
        if v not in SPLIT_TYPES:
            raise ValueError(f'Split type must be one of {list(SPLIT_TYPES)}')
        return v

class ExpenseCreate(ExpenseBase):
    pass

class ExpenseUpdate(ExpenseBase):
    pass

class Expense(BaseModel):
    id: int
    group_id: int
    title: str
    amount: int
    date: str
    payer_id: int
    split_type: str
    created_by_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)

class ExpenseListItem(Expense):
    payer_name: str

class ShareDetail(BaseModel):
    participant_id: int
    participant_name: str
    amount_owed: int

class ExpenseWithShares(ExpenseListItem):
    shares: list[ShareDetail]


class ParticipantBalance(BaseModel):
    """Positive balance means the participant is owed money, negative means they owe."""
    participant_id: int
    name: str
    user_id: Optional[int] = None
    balance: int
    is_current_user: bool = False

class GroupBalance(BaseModel):
    group_id: int
    group_name: str
    balance: int

class BalanceDashboard(BaseModel):
    to_receive: int
    to_pay: int
    net: int
    groups: list[GroupBalance]


class PersonalExpenseCreate(BaseModel):
    title: str
    amount: int  # In cents
    category: str = DEFAULT_CATEGORY
    date: Optional[str] = None

    @field_validator('category')
    @classmethod
    def validate_category(cls, v):
        if v not in CATEGORY_NAMES:
            raise ValueError(f'Category must be one of {list(CATEGORY_NAMES)}')
        return v

class PersonalExpense(BaseModel):
    id: int
    title: str
    amount: int
    category: str
    date: str

    model_config = ConfigDict(from_attributes=True)

class BudgetUpdate(BaseModel):
    amount: int  # In cents

class MonthlyBudget(BaseModel):
    year: int
    month: int
    amount: int

class CategoryTotal(BaseModel):
    name: str
    icon: str
    total: int

class MonthlySummary(BaseModel):
    year: int
    month: int
    total_spent: int
    budget: int
    remaining: int
    percentage_used: float
    categories: list[CategoryTotal]
