"""Editor settings persisted as JSON in the user's config directory"""

import os
import json
import logging
from dataclasses import dataclass, asdict, fields

from constants import DEFAULT_ZOOM, MIN_LAYER_SIZE, SNAP_THRESHOLD
from utils.logger import loggerRaise

CONFIG_DIR = os.path.join(os.path.expanduser("~"), ".adcanvas")
SETTINGS_FILE = os.path.join(CONFIG_DIR, "settings.json")

_logger = logging.getLogger('Settings')


@dataclass
class EditorSettings:
	"""Interaction settings for the canvas"""
	snap_threshold: float = SNAP_THRESHOLD
	snapping_enabled: bool = True
	min_layer_size: float = MIN_LAYER_SIZE
	default_zoom: float = DEFAULT_ZOOM

	@classmethod
	def from_dict(cls, data):
		"""Known keys only; anything missing keeps its default"""
		known = {f.name for f in fields(cls)}
		return cls(**{key: value for key, value in data.items() if key in known})

	def to_dict(self):
		return asdict(self)

	@classmethod
	def load(cls, path=SETTINGS_FILE):
		"""Load settings, defaults when the file does not exist

		Raises:
			ValueError: If the file is not a JSON object (via loggerRaise)
		"""
		if not os.path.exists(path):
			return cls()
		try:
			with open(path, 'r', encoding='utf-8') as f:
				data = json.load(f)
			if not isinstance(data, dict):
				raise ValueError(f"Settings file {path} does not hold a JSON object")
		except Exception as e:
			loggerRaise(e, "Error loading settings")
		_logger.debug(f"Loaded settings from {path}")
		return cls.from_dict(data)

	def save(self, path=SETTINGS_FILE):
		"""Write settings, creating the config directory if needed"""
		try:
			os.makedirs(os.path.dirname(path) or '.', exist_ok=True)
			with open(path, 'w', encoding='utf-8') as f:
				json.dump(self.to_dict(), f, indent=2)
		except Exception as e:
			loggerRaise(e, "Error saving settings")
		_logger.debug(f"Saved settings to {path}")
