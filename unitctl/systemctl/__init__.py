from unitctl.systemctl.commands import Systemctl
from unitctl.systemctl.process import ProcessResult, ProcessRunner

__all__ = [
    'ProcessResult',
    'ProcessRunner',
    'Systemctl',
]
