"""
Process tree termination for external build processes.

Maven forks helper JVMs (surefire, compiler daemons), so stopping a build
means stopping the whole process tree, not only the launcher.
"""

import logging
from typing import List

import psutil

logger = logging.getLogger(__name__)

# Seconds to wait after SIGTERM before escalating to SIGKILL.
GRACEFUL_TERMINATION_TIMEOUT = 5.0


def _is_process_alive(process: psutil.Process) -> bool:
    """Check whether a process is running and not a zombie."""
    try:
        if not process.is_running():
            return False
        return process.status() not in [psutil.STATUS_ZOMBIE, psutil.STATUS_DEAD]
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        return False


def _collect_process_tree(parent: psutil.Process) -> List[psutil.Process]:
    """Return the parent followed by all of its descendants."""
    try:
        children = parent.children(recursive=True)
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        children = []
    return [parent] + children


def terminate_process_tree(
    pid: int, name: str, timeout: float = GRACEFUL_TERMINATION_TIMEOUT
) -> None:
    """
    Terminate a process and all of its descendants.

    Every process of the tree receives SIGTERM first; processes still alive
    after ``timeout`` seconds are killed. Processes that exit on their own
    while this runs are ignored.

    Args:
        pid: PID of the root process
        name: Human-readable name used in log messages
        timeout: Grace period before SIGKILL
    """
    if pid <= 0:
        logger.warning(f"Invalid PID {pid} for {name}, skipping termination")
        return

    try:
        parent = psutil.Process(pid)
    except psutil.NoSuchProcess:
        logger.info(f"Process {name} (PID: {pid}) already terminated")
        return

    processes = _collect_process_tree(parent)
    logger.info(f"Terminating {name} (PID: {pid}) and {len(processes) - 1} descendants")

    for process in processes:
        try:
            process.terminate()
        except psutil.NoSuchProcess:
            continue
        except psutil.AccessDenied:
            logger.warning(f"Access denied sending SIGTERM to PID {process.pid}")

    _, still_alive = psutil.wait_procs(processes, timeout=timeout)

    for process in still_alive:
        if not _is_process_alive(process):
            continue
        try:
            process.kill()
            logger.debug(f"Sent SIGKILL to PID {process.pid}")
        except psutil.NoSuchProcess:
            continue
        except psutil.AccessDenied:
            logger.error(f"Access denied killing PID {process.pid} of {name}")
