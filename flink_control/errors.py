# flink_control/errors.py


class FlinkClientError(Exception):
    """Base class for everything the job control client raises."""


class RequestError(FlinkClientError):
    """The JobManager could not be reached or answered with an error status."""


class UploadError(FlinkClientError):
    """A jar upload was rejected or the local jar file is missing."""


class NotFoundError(FlinkClientError):
    """A jar, entry class or job is absent on the cluster."""


class SubmissionError(FlinkClientError):
    """A jar run did not produce a job id."""
