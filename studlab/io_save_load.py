# io_save_load.py
# load/save helpers

from PIL import Image
import json, numpy as np, pathlib as _p

from .decide import Thresholds, validate_thresholds

def load_gray(path: str) -> np.ndarray:
    """8-bit luminance scaled to float64 [0,1]."""
    with Image.open(path) as im:
        return np.asarray(im.convert('L'), dtype=np.float64) / 255.0

def save_gray_png(path: str, gray: np.ndarray):
    """[0,1] floats (clipped) -> 8-bit grayscale PNG."""
    _p.Path(path).parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(np.rint(np.clip(gray, 0.0, 1.0) * 255).astype(np.uint8)).save(path)

def save_json(path: str, obj: dict):
    _p.Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f: json.dump(obj, f, ensure_ascii=False, indent=2)

def load_thresholds(path: str, base: Thresholds|None=None) -> Thresholds:
    """JSON object of Thresholds field overrides -> validated Thresholds."""
    with open(path, encoding='utf-8') as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object, got {type(data).__name__}")
    known = set(Thresholds().as_dict())
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"{path}: unknown threshold(s): {', '.join(unknown)}")
    return validate_thresholds((base or Thresholds()).replace(**data))
