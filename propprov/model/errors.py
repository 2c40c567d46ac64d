# propprov/model/errors.py
#
# Error taxonomy.
#
#   PPError
#     CommandError      bad/unknown command input; reported inline
#     ParseError        malformed dataset file; reported inline, load aborted
#     ConsistencyError  renderer invariant broken; fatal
#
# Store-level errors are ValueError subclasses; the loader re-raises them as
# line-numbered ParseError.


class PPError(Exception):
    pass


class CommandError(PPError):
    pass


class ParseError(PPError):
    def __init__(self, message: str, line: int | None = None):
        self.line = line
        super().__init__(f"Line {line}: {message}" if line is not None else message)


class ConsistencyError(PPError):
    pass


class DuplicateSymbol(ValueError):
    pass


class DuplicateRelationElement(ValueError):
    pass


class SelfRelation(ValueError):
    pass
