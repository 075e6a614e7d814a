"""Form state and validation for surveys and ticket raising."""

from .selection import EmployeeSelection, FormValidationError, search_employees
from .surveys import LOCATIONS, REVIEW_WEEKS, WEEK1_DAYS, Week1Form, Week234Form
from .tickets import RaiseIssueForm, TicketRow

__all__ = [
    "EmployeeSelection",
    "FormValidationError",
    "LOCATIONS",
    "REVIEW_WEEKS",
    "RaiseIssueForm",
    "TicketRow",
    "WEEK1_DAYS",
    "Week1Form",
    "Week234Form",
    "search_employees",
]
