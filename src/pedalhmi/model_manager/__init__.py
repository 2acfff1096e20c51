"""Generic building blocks shared by the bridge's services.

- **ObserverManager**: thread-safe subscriber list used by every event channel
- **PydanticPersistence**: load/save Pydantic models to JSON with atomic writes
"""

from pedalhmi.model_manager.observer import ObserverManager
from pedalhmi.model_manager.persistence import PydanticPersistence

__all__ = [
    "ObserverManager",
    "PydanticPersistence",
]
