from unitctl.utils.base_model import BaseModel, parse_docstring_args
from unitctl.utils.locks import ReadWriteLock

__all__ = [
    'BaseModel',
    'ReadWriteLock',
    'parse_docstring_args',
]
