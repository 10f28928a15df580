from dataclasses import dataclass
from typing import List

from tlox.ast import Stmt


@dataclass
class FunctionDef:
    """Entry of the global function table: declared parameters and body."""
    name: str
    params: List[str]
    body: List[Stmt]

    @property
    def arity(self) -> int:
        return len(self.params)

    def __repr__(self) -> str:
        return f"<fun {self.name}({', '.join(self.params)})>"
