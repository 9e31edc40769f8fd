# interior_ledger/models/enums.py
import enum

class EntryType(str, enum.Enum):
    income = "Income"
    expense = "Expense"

class ProjectStatus(str, enum.Enum):
    under_discussion = "Under Discussion"
    in_progress = "In Progress"
    completed = "Completed"

class DocumentType(str, enum.Enum):
    invoice = "Invoice"
    estimate = "Estimate"
    quotation = "Quotation"

class BillType(str, enum.Enum):
    original = "ORIGINAL"
    duplicate = "DUPLICATE"

class ClientTitle(str, enum.Enum):
    mr = "Mr"
    ms = "Ms"
    none = "None"

class ItemUnit(str, enum.Enum):
    sft = "Sft"   # priced per square foot (width x height)
    lump = "Lump"
    ls = "Ls"     # lump sum

class DiscountType(str, enum.Enum):
    flat = "flat"
    percentage = "percentage"
