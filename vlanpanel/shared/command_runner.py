import shlex
import subprocess
from typing import List, Optional, Union


class CommandRunner:
    def __init__(self, logger):
        self.logger = logger

    def spawn(self, cmd: Union[str, List[str]]) -> Optional[subprocess.Popen]:
        """
        Launch a helper program detached from the panel, without waiting for it.
        `cmd` is either an argv list or a string split with shell rules.
        """
        argv = shlex.split(cmd) if isinstance(cmd, str) else list(cmd)
        if not argv:
            self.logger.error("Refusing to spawn an empty command.")
            return None
        try:
            process = subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            self.logger.error(f"Error running command: {' '.join(argv)}: {e}")
            return None
        self.logger.info(f"Spawned {argv[0]} (pid {process.pid}).")
        return process

