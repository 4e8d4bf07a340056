import copy
import json
from pathlib import Path
from typing import Any, Dict, Optional


class TestDataLoader:
    """Seed rows and request payloads shared by the integration tests."""

    __test__ = False

    path = Path(__file__).parent / "test_data.json"
    _data: Optional[Dict[str, Any]] = None

    @classmethod
    def _load(cls) -> Dict[str, Any]:
        if cls._data is None:
            with open(cls.path) as f:
                cls._data = json.load(f)
        return cls._data

    @classmethod
    def get(cls, key: str) -> Any:
        # KeyError on a typo rather than a silent None
        return cls._load()[key]

    @classmethod
    def get_copy(cls, key: str) -> Any:
        return copy.deepcopy(cls.get(key))
