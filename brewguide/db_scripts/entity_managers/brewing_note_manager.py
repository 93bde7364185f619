##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
Module for managing brewing notes.
"""

import logging
from typing import List

from brewguide.backends.sqlite.document_store import BREWING_NOTES
from brewguide.db_scripts.data_models import BrewingNoteModel
from brewguide.db_scripts.entity_managers.entity_manager import ALL_ENTRIES, EntityManager
from brewguide.exceptions import BrewingNoteError
from brewguide.utils import current_millis, generate_record_id


LOG = logging.getLogger(__name__)


class BrewingNoteManager(EntityManager[BrewingNoteModel]):
    """
    Manages the brewing notes.

    Methods:
        get_all_notes: Retrieve every note, newest first (fail soft).
        save_note: Insert or replace a note.
        delete_note: Delete a note.
    """

    collection_name = BREWING_NOTES
    backup_key = BREWING_NOTES
    model_class = BrewingNoteModel
    error_class = BrewingNoteError

    def get_all_notes(self) -> List[BrewingNoteModel]:
        """
        Retrieve every note, newest first.

        Returns:
            The notes; empty if none are stored or the read failed.
        """
        return sorted(self.get_all(), key=lambda note: note.timestamp or 0, reverse=True)

    def save_note(self, note: BrewingNoteModel) -> BrewingNoteModel:
        """
        Insert a note, or replace the note with the same id. A note without an
        id or timestamp gets one.

        Args:
            note: The note to save. Not modified.

        Returns:
            A copy of the note as stored.

        Raises:
            BrewingNoteError: If the note could not be written.
        """
        note = note.copy()
        if not note.id:
            note.id = generate_record_id()
        if not note.timestamp:
            note.timestamp = current_millis()
        try:
            notes = self._read_all()
            index = next((i for i, stored in enumerate(notes) if stored.id == note.id), None)
            if index is None:
                notes.append(note)
            else:
                notes[index] = note
            self.writer.put(BREWING_NOTES, note.to_dict(), self.backup_key, self._backup_value(notes))
            self.cache.set(ALL_ENTRIES, notes)
        except Exception as exc:  # pylint: disable=broad-except
            self.invalidate()
            self._write_failed(f"Failed to save brewing note '{note.id}'", exc)
        return note.copy()

    def delete_note(self, note_id: str) -> bool:
        """
        Delete a note.

        Args:
            note_id: The id of the note.

        Returns:
            True if a note was deleted, False if none had that id.

        Raises:
            BrewingNoteError: If the deletion could not be written.
        """
        try:
            notes = self._read_all()
            remaining = [note for note in notes if note.id != note_id]
            if len(remaining) == len(notes):
                return False
            self.writer.delete(BREWING_NOTES, note_id, self.backup_key, self._backup_value(remaining))
            self.cache.set(ALL_ENTRIES, remaining)
        except Exception as exc:  # pylint: disable=broad-except
            self.invalidate()
            self._write_failed(f"Failed to delete brewing note '{note_id}'", exc)
        return True

    def delete(self, identifier: str) -> bool:
        return self.delete_note(identifier)
