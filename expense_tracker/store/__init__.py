from .state import LedgerState
from .ledger import Ledger
from .seed import demo_state

__all__ = ["LedgerState", "Ledger", "demo_state"]
