from typing import Any, Dict, Iterator

from brisk.errors import UndefinedVariable


class Environment:
    """The single global table mapping variable names to values.

    Blocks do not open new scopes: every statement of a program reads and
    writes this one table. Assigning a name both declares and overwrites it.
    """
    def __init__(self):
        self.values: Dict[str, Any] = {}

    def get(self, name: str) -> Any:
        if name in self.values:
            return self.values[name]
        raise UndefinedVariable(f'undefined variable {name}')

    def set(self, name: str, value: Any):
        self.values[name] = value

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)
