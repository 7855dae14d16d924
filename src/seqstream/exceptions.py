class StreamError(RuntimeError):
    """ General error raised by stream pipelines. """


class AlreadyConsumedError(StreamError):
    """ Raised when a stream is used after it has been linked or consumed. """


class EmptySequenceError(StreamError, ValueError):
    """ Raised when a value is required from a stream that produced no elements. """


class NonTerminatingConfigurationError(StreamError, ValueError):
    """ Raised when a full-materialization stage is applied to an infinite stream. """


class BufferOverflowError(StreamError, MemoryError):
    """ Raised when a buffering stage exhausts the configured memory budget. """
