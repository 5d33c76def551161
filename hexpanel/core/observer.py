"""Presentation-agnostic view of a list model's change notifications.

Every collection in hexpanel is a ``QAbstractListModel`` and reports
structural changes (insert/remove/move), in-place updates and resets
through Qt's model signals. ``attach_observer`` translates those signals
into plain method calls so a non-Qt consumer can track rows by position,
e.g. remap a selected index after a move instead of dropping it.
"""

from __future__ import annotations

from typing import Sequence

from PyQt6.QtCore import QAbstractItemModel, QModelIndex, Qt

# First custom role number for every hexpanel model.
USER_ROLE = Qt.ItemDataRole.UserRole.value


class ListObserver:
    """Base class for row-level change listeners. Override what you need."""

    def on_inserted(self, first: int, last: int) -> None:
        pass

    def on_removed(self, first: int, last: int) -> None:
        pass

    def on_moved(self, source: int, destination: int) -> None:
        """``destination`` is the row's index after the move."""

    def on_changed(self, first: int, last: int, roles: Sequence[int]) -> None:
        pass

    def on_reset(self) -> None:
        pass


class ObserverBinding:
    """Live connection between one model and one observer."""

    def __init__(self, model: QAbstractItemModel, observer: ListObserver) -> None:
        self.model = model
        self.observer = observer
        model.rowsInserted.connect(self._inserted)
        model.rowsRemoved.connect(self._removed)
        model.rowsMoved.connect(self._moved)
        model.dataChanged.connect(self._changed)
        model.modelReset.connect(self._reset)

    def detach(self) -> None:
        self.model.rowsInserted.disconnect(self._inserted)
        self.model.rowsRemoved.disconnect(self._removed)
        self.model.rowsMoved.disconnect(self._moved)
        self.model.dataChanged.disconnect(self._changed)
        self.model.modelReset.disconnect(self._reset)

    def _inserted(self, parent: QModelIndex, first: int, last: int) -> None:
        self.observer.on_inserted(first, last)

    def _removed(self, parent: QModelIndex, first: int, last: int) -> None:
        self.observer.on_removed(first, last)

    def _moved(self, parent: QModelIndex, start: int, end: int,
               destination: QModelIndex, row: int) -> None:
        # Qt reports the insertion point in pre-move coordinates.
        span = end - start + 1
        self.observer.on_moved(start, row - span if row > end else row)

    def _changed(self, top_left: QModelIndex, bottom_right: QModelIndex, roles=()) -> None:
        self.observer.on_changed(top_left.row(), bottom_right.row(), tuple(roles))

    def _reset(self) -> None:
        self.observer.on_reset()


def attach_observer(model: QAbstractItemModel, observer: ListObserver) -> ObserverBinding:
    return ObserverBinding(model, observer)
