import json
import logging
import pathlib
from dataclasses import asdict, dataclass, fields
from typing import Union

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = pathlib.Path(__file__).resolve().parent.parent / "config" / "calibration.json"


def _to_int(value) -> int:
    if isinstance(value, bool):
        raise TypeError("expected an integer")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError("expected an integer")
    return int(value)


def _to_float(value) -> float:
    if isinstance(value, bool):
        raise TypeError("expected a number")
    return float(value)


@dataclass
class CalibrationSettings:
    """Optimization parameters of the tool calibration."""
    iterations: int = 400000
    precision: float = 1e-2
    delta: float = 1e-6
    damping: float = 0.01
    x_initial: float = 0.0
    y_initial: float = 0.0
    z_initial: float = 0.0
    # progress is logged at DEBUG level every log_interval iterations
    log_interval: int = 10000

    @classmethod
    def from_dict(cls, data: dict) -> "CalibrationSettings":
        if not isinstance(data, dict):
            raise ValueError(f"Calibration settings must be a JSON object, got {type(data).__name__}.")
        known = {f.name: f.type for f in fields(cls)}
        unknown = set(data) - set(known)
        if unknown:
            raise ValueError(f"Unknown calibration settings: {', '.join(sorted(str(k) for k in unknown))}")

        values = {}
        for key, value in data.items():
            try:
                values[key] = _to_int(value) if key in ("iterations", "log_interval") else _to_float(value)
            except (TypeError, ValueError) as e:
                raise ValueError(f"Invalid value for setting '{key}': {value!r}") from e
        return cls(**values)

    def to_dict(self) -> dict:
        return asdict(self)


def load_settings(path: Union[str, pathlib.Path] = DEFAULT_CONFIG_PATH) -> CalibrationSettings:
    path = pathlib.Path(path)
    if not path.exists():
        raise FileNotFoundError(f"{path} does not exist.")
    with open(path, 'r') as f:
        data = json.load(f)
    settings = CalibrationSettings.from_dict(data)
    logger.debug(f"Loaded calibration settings from {path}: {settings}")
    return settings


def save_settings(settings: CalibrationSettings, path: Union[str, pathlib.Path] = DEFAULT_CONFIG_PATH) -> None:
    path = pathlib.Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(settings.to_dict(), f, indent=4)
    logger.info(f"Saved calibration settings to {path}")
