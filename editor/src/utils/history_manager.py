"""
Undo/Redo History Manager for the Ad Canvas Editor

Manages scene snapshots with undo/redo and jump-to-entry.
The transform engine commits one snapshot per finished gesture; other
editors commit after their own edits.
"""

import copy
import logging

from constants import MAX_HISTORY


class HistoryManager:
	"""Manages undo/redo history with state snapshots"""

	def __init__(self, max_history=MAX_HISTORY):
		"""
		Initialize the history manager

		Args:
			max_history: Maximum number of states to keep in history
		"""
		self._logger = logging.getLogger('History')
		self.max_history = max_history
		self.history = []  # List of {'data', 'description'} entries
		self.current_index = -1  # -1 means no states
		self._listeners = []

	def save_state(self, state_data, description=""):
		"""
		Save a new state to history

		Args:
			state_data: Dictionary containing the full state to save
			description: Optional description of the change
		"""
		# Saving after an undo discards the redo branch
		if self.current_index < len(self.history) - 1:
			self.history = self.history[:self.current_index + 1]

		self.history.append({
			'data': copy.deepcopy(state_data),
			'description': description
		})
		self.current_index += 1

		if len(self.history) > self.max_history:
			self.history.pop(0)
			self.current_index -= 1

		self._notify_listeners()
		self._logger.debug(f"State saved: {description} (index: {self.current_index}, total: {len(self.history)})")

	def undo(self):
		"""
		Move back one state in history

		Returns:
			Dictionary containing the previous state, or None if at beginning
		"""
		if not self.can_undo():
			self._logger.debug("Cannot undo - at beginning of history")
			return None
		return self._move_to(self.current_index - 1, "Undo")

	def redo(self):
		"""
		Move forward one state in history

		Returns:
			Dictionary containing the next state, or None if at end
		"""
		if not self.can_redo():
			self._logger.debug("Cannot redo - at end of history")
			return None
		return self._move_to(self.current_index + 1, "Redo")

	def jump_to(self, index):
		"""
		Move to any recorded state (history panel click)

		Args:
			index: Position in history, 0 = oldest kept state

		Returns:
			Dictionary containing that state

		Raises:
			IndexError: If index is outside the recorded history
		"""
		if not 0 <= index < len(self.history):
			raise IndexError(f"History index {index} out of range (0..{len(self.history) - 1})")
		return self._move_to(index, "Jump")

	def _move_to(self, index, action):
		self.current_index = index
		entry = self.history[index]
		self._notify_listeners()
		self._logger.debug(f"{action} to: {entry['description']} (index: {index})")
		return copy.deepcopy(entry['data'])

	def can_undo(self):
		"""Check if undo is available"""
		return self.current_index > 0

	def can_redo(self):
		"""Check if redo is available"""
		return self.current_index < len(self.history) - 1

	def clear(self):
		"""Clear all history"""
		self.history = []
		self.current_index = -1
		self._notify_listeners()
		self._logger.debug("History cleared")

	def add_listener(self, callback):
		"""
		Add a listener to be notified when history state changes

		Args:
			callback: Function to call when history changes (receives can_undo, can_redo)
		"""
		self._listeners.append(callback)

	def remove_listener(self, callback):
		"""Remove a listener"""
		if callback in self._listeners:
			self._listeners.remove(callback)

	def _notify_listeners(self):
		for callback in self._listeners:
			try:
				callback(self.can_undo(), self.can_redo())
			except Exception:
				self._logger.exception("Error notifying listener")

	def get_descriptions(self):
		"""Descriptions of every recorded state, oldest first"""
		return [entry['description'] for entry in self.history]

	def get_current_description(self):
		"""Get the description of the current state"""
		if 0 <= self.current_index < len(self.history):
			return self.history[self.current_index]['description']
		return ""

	def get_undo_description(self):
		"""Get the description of the state that would be restored by undo"""
		if self.can_undo():
			return self.history[self.current_index - 1]['description']
		return ""

	def get_redo_description(self):
		"""Get the description of the state that would be restored by redo"""
		if self.can_redo():
			return self.history[self.current_index + 1]['description']
		return ""
