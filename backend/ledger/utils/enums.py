from enum import Enum


class SplitType(str, Enum):
    EQUAL = "equal"
    PERCENTAGE = "percentage"
    AMOUNT = "amount"
    SHARES = "shares"


class ExpenseCategory(str, Enum):
    FOOD = "food"
    TRAVEL = "travel"
    LODGING = "lodging"
    TICKETS = "tickets"
    OTHER = "other"
