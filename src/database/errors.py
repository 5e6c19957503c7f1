from sqlalchemy.exc import StatementError


def describe_store_error(error: BaseException) -> str:
    """Describe a store failure without the SQL statement or bound parameters.

    Bound parameters can hold raw key values, so only the driver's own
    message is kept for statement errors.
    """
    if isinstance(error, StatementError) and error.orig is not None:
        return f"{type(error).__name__}: {error.orig}"
    return type(error).__name__
