from .edit_session import EditSessionManager, FormField
from .filter_engine import filter_records
from .paginator import PageResult, Paginator, paginate
from .selection_tracker import SelectionTracker
from .sort_engine import sort_records

__all__ = [
    "EditSessionManager",
    "FormField",
    "PageResult",
    "Paginator",
    "SelectionTracker",
    "filter_records",
    "paginate",
    "sort_records",
]
