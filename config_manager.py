"""JSON configuration for the Queens benchmark.

The file has three sections, each a flat object:

- ``experiment_settings``: ``N_values``, ``difficulties``, ``runs_per_size``,
  ``seed`` and ``output_dir``.
- ``timeout_settings``: ``solve_time_limit`` and ``experiment_timeout`` in
  seconds (``null`` disables a limit).
- ``generator_settings``: ``verify``.

Missing sections read as empty objects; interpreting the values is left to
``queens.analysis.cli.apply_configuration``.
"""
import json
from pathlib import Path

EXPERIMENT = "experiment_settings"
TIMEOUTS = "timeout_settings"
GENERATOR = "generator_settings"

DEFAULT_DIFFICULTIES = ["Easy", "Medium", "Hard"]


class ConfigManager:
    """Read and update one configuration file.

    Parameters
    ----------
    config_path : str | os.PathLike, default "config.json"
        Location of the JSON file. It must exist.
    """

    def __init__(self, config_path="config.json"):
        self.config_path = Path(config_path)
        self.config = self.load_config()

    def load_config(self):
        if not self.config_path.is_file():
            raise FileNotFoundError(
                f"Configuration file not found: {self.config_path} "
                f"(copy config.json from the project root as a starting point)"
            )
        with self.config_path.open("r") as f:
            return json.load(f)

    def save_config(self):
        with self.config_path.open("w") as f:
            json.dump(self.config, f, indent=2)
            f.write("\n")

    def section(self, name):
        """Return a configuration section, or an empty dict when absent."""
        return self.config.get(name) or {}

    def get_experiment_settings(self):
        return self.section(EXPERIMENT)

    def get_timeout_settings(self):
        return self.section(TIMEOUTS)

    def get_generator_settings(self):
        return self.section(GENERATOR)

    def get_difficulties(self):
        """Difficulty labels as written in the file (not yet normalized)."""
        return list(self.get_experiment_settings().get("difficulties", DEFAULT_DIFFICULTIES))

    def update_setting(self, section, key, value):
        """Set ``section.key`` and write the file back immediately."""
        self.config.setdefault(section, {})[key] = value
        self.save_config()
