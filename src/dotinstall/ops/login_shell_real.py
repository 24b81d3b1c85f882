"""Real login shell operations using subprocess to call chsh."""

import getpass
import logging
import subprocess

from dotinstall.ops.login_shell import LoginShell

logger = logging.getLogger(__name__)


class RealLoginShell(LoginShell):
    """Production implementation running `sudo chsh -s <shell> <user>`.

    The command inherits the terminal so sudo can prompt for a password.
    Its exit code is returned rather than raised: a denied privilege
    elevation must not stop the remaining provisioning steps.
    """

    def current_user(self) -> str:
        return getpass.getuser()

    def set_default_shell(self, user: str, shell_path: str) -> int:
        cmd = ["sudo", "chsh", "-s", shell_path, user]
        logger.debug("Running %s", " ".join(cmd))
        # check=False: caller records a nonzero exit as a failed step
        result = subprocess.run(cmd, check=False)
        logger.debug("chsh exited with %d", result.returncode)
        return result.returncode
