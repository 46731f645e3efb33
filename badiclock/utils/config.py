# badiclock/utils/config.py
import os
import yaml

DEFAULT_CONFIG_PATH = "config/defaults.yaml"

class AttrDict(dict):
    """Dict that also supports attribute access: cfg.mode and cfg['mode'] both work."""
    def __getattr__(self, item):
        try:
            return self[item]
        except KeyError as e:
            raise AttributeError(item) from e
    def __setattr__(self, key, value):
        self[key] = value

def _to_attr(obj):
    if isinstance(obj, dict):
        return AttrDict({k: _to_attr(v) for k, v in obj.items()})
    if isinstance(obj, list):
        return [_to_attr(x) for x in obj]
    return obj

def config_path() -> str:
    return os.environ.get("BADI_CONFIG", DEFAULT_CONFIG_PATH)

def load_config(path: str):
    """
    Load YAML config from `path` and apply env overrides:
      - BADI_MODE                (config['mode'])
      - BADI_SUNSET_SEARCH_DAYS  (config['solar']['sunset_search_days'])
      - BADI_DEFAULT_CITY        (config['default_location']['city'])
      - BADI_STORE_PATH          (config['store']['path'], implies backend=sqlite)
    Returns an AttrDict for convenient access.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"config root must be a mapping: {path}")

    mode = os.getenv("BADI_MODE")
    if mode:
        data["mode"] = mode

    search_days = os.getenv("BADI_SUNSET_SEARCH_DAYS")
    if search_days:
        data.setdefault("solar", {})["sunset_search_days"] = int(search_days)

    city = os.getenv("BADI_DEFAULT_CITY")
    if city:
        data.setdefault("default_location", {})["city"] = city

    store_path = os.getenv("BADI_STORE_PATH")
    if store_path:
        data["store"] = {"backend": "sqlite", "path": store_path}

    return _to_attr(data)

def sunset_search_days(cfg, default: int = 2) -> int:
    solar = (cfg or {}).get("solar") or {}
    try:
        return max(1, int(solar.get("sunset_search_days", default)))
    except (TypeError, ValueError):
        return default

def default_city(cfg):
    loc = (cfg or {}).get("default_location") or {}
    return loc.get("city")
