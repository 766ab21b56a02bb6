from enum import Enum

class JobState(str, Enum):
    # scheduling
    INITIALIZING = "INITIALIZING"  # submitted, JobMaster not yet up
    CREATED = "CREATED"            # graph built, no task scheduled

    # active
    RUNNING = "RUNNING"
    RESTARTING = "RESTARTING"
    FAILING = "FAILING"
    CANCELLING = "CANCELLING"
    RECONCILING = "RECONCILING"    # JobManager failover, waiting on task managers

    # terminal
    FINISHED = "FINISHED"
    FAILED = "FAILED"
    CANCELED = "CANCELED"
    SUSPENDED = "SUSPENDED"        # HA shutdown; job may be resumed elsewhere


TERMINAL_STATES = {
    JobState.FINISHED.value,
    JobState.FAILED.value,
    JobState.CANCELED.value,
    JobState.SUSPENDED.value,
}


def is_terminal(state: str | None) -> bool:
    return state in TERMINAL_STATES
