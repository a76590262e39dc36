import asyncio
import logging
from collections.abc import Sequence
from contextlib import suppress

from pydantic import Field

from unitctl.errors import ProcessError, ProcessTimeoutError
from unitctl.utils import BaseModel


class ProcessResult(BaseModel):
    """Outcome of one external command.

    Args:
        argv: Command line that was executed
        returncode: Exit status of the process
        stdout: Decoded standard output
        stderr: Decoded standard error
    """

    argv: tuple[str, ...] = Field(...)
    returncode: int = Field(...)
    stdout: str = Field('')
    stderr: str = Field('')

    @property
    def success(self) -> bool:
        return self.returncode == 0


class ProcessRunner:
    """Runs external commands without a shell and with a bounded wait.
    """

    def __init__(self, timeout: float = 30.0) -> None:
        """Initialize the runner.

        Args:
            timeout: Default seconds to wait for a command to finish
        """
        self._logger = logging.getLogger(__name__)
        self._timeout = timeout

    async def run(
        self,
        argv: Sequence[str],
        check: bool = False,
        timeout: float | None = None,
    ) -> ProcessResult:
        """Run `argv` and collect its output.

        Args:
            argv: Program and arguments
            check: Raise ProcessError on a non-zero exit status
            timeout: Override the default timeout for this call

        Returns:
            ProcessResult with decoded output

        Raises:
            ProcessError: If the program cannot be spawned, or exits non-zero
                when `check` is set
            ProcessTimeoutError: If the program does not finish in time
        """
        argv = tuple(argv)
        timeout = self._timeout if timeout is None else timeout
        self._logger.debug('Running %s', ' '.join(argv))

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            self._logger.error('Failed to spawn %s: %s', argv[0], e)
            raise ProcessError(argv, f'failed to spawn: {e}') from e

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(),
                timeout=timeout,
            )
        except TimeoutError:
            with suppress(ProcessLookupError):
                process.kill()
            await process.wait()
            self._logger.error(
                '%s did not finish within %.1fs',
                ' '.join(argv),
                timeout,
            )
            raise ProcessTimeoutError(argv, timeout) from None

        result = ProcessResult(
            argv=argv,
            returncode=process.returncode
            if process.returncode is not None else -1,
            stdout=stdout.decode('utf-8', errors='replace'),
            stderr=stderr.decode('utf-8', errors='replace'),
        )

        if check and not result.success:
            self._logger.warning(
                '%s exited with status %d: %s',
                ' '.join(argv),
                result.returncode,
                result.stderr.strip(),
            )
            raise ProcessError(
                argv,
                result.stderr.strip() or f'exit status {result.returncode}',
                result.returncode,
            )

        return result
