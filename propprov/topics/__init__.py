from propprov.model.schema import State
from propprov.topics import dataset, view

ALL_COMMANDS = {
    State.MAIN: dict(dataset.COMMANDS),
    State.TABLE_VIEW: dict(view.COMMANDS),
}
