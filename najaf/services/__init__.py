"""
                        Services Module

Contains all business logic services with the hybrid architecture pattern.
Services with an external dependency have Mock (development) and Real
(production) implementations.

Services:
    - storage: Shared key-value store (memory, JSON files, database)
    - ordering: Cart, order lifecycle, session state and order sync poller
    - notifications: Staff new-order chime
    - ai: Dish descriptions and sales tips (OpenAI via LangChain)
    - dashboard: Admin statistics
    - sessions: Per-client session registry
    - excel_manager: Thread-safe Excel ledger export
"""

from najaf.services.excel_manager import ExcelManager

__all__ = ["ExcelManager"]
