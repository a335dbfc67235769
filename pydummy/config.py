# pydummy/config.py
from pathlib import Path
from typing import Any, Dict
import logging
import os
import importlib.resources as ir

from .builder import ObjectBuilder
from .errors import ConfigError
from .imports import normalize_roots, prepend_sys_path, resolve_attr
from .logconf import configure_logger

# Exposed for debugging: where the *project-local* config was loaded from (or None).
# Never points to the user-level config: the project root is anchored on it.
LAST_CONFIG_PATH: Path | None = None

_log = logging.getLogger("pydummy.config")

_NAMES = ("config.toml", "config.yaml", "config.yml")


# ---------- File discovery helpers ----------


def _first_existing(paths: list[Path]) -> Path | None:
    for p in paths:
        if p.is_file():
            return p
    return None


def _candidates(base: Path) -> list[Path]:
    return [base / n for n in _NAMES]


def _find_project_config(start: Path) -> Path | None:
    """
    Return the nearest '.pydummy/config.{toml,yaml,yml}' walking upward from 'start'.
    """
    cur = start.resolve()
    for p in [cur, *cur.parents]:
        cand = _first_existing(_candidates(p / ".pydummy"))
        if cand:
            _log.info("project config: %s", cand)
            return cand
    return None


def _find_user_config() -> Path | None:
    """
    Return the user-level config in precedence order:
      1) $PYDUMMY_CONFIG           (exact path)
      2) $XDG_CONFIG_HOME/pydummy/config.{toml,yaml,yml}
      3) ~/.config/pydummy/config.{toml,yaml,yml}
      4) ~/.pydummy/config.{toml,yaml,yml}
    """
    env_path = os.getenv("PYDUMMY_CONFIG")
    if env_path:
        env_cand = Path(env_path).expanduser()
        if env_cand.is_file():
            _log.info("user config via PYDUMMY_CONFIG=%s", env_cand)
            return env_cand

    xdg_home = os.getenv("XDG_CONFIG_HOME")
    if xdg_home:
        cand = _first_existing(_candidates(Path(xdg_home) / "pydummy"))
        if cand:
            _log.info("user config via XDG: %s", cand)
            return cand

    for base in (Path.home() / ".config" / "pydummy", Path.home() / ".pydummy"):
        cand = _first_existing(_candidates(base))
        if cand:
            _log.info("user config: %s", cand)
            return cand

    return None


# ---------- Parsers ----------


def _load_toml_text(txt: str) -> Dict[str, Any]:
    try:
        import tomllib  # Python >= 3.11
    except ModuleNotFoundError:
        import tomli as tomllib  # backport declared for older interpreters
    try:
        return tomllib.loads(txt)
    except tomllib.TOMLDecodeError as exc:
        _log.warning("Failed to parse TOML: %s", exc)
        return {}


def _load_yaml_text(txt: str) -> Dict[str, Any]:
    import yaml  # PyYAML

    try:
        data = yaml.safe_load(txt) or {}
    except yaml.YAMLError as exc:
        _log.warning("Failed to parse YAML: %s", exc)
        return {}
    if not isinstance(data, dict):
        _log.warning("YAML config root is not a mapping; ignoring.")
        return {}
    return data


def _parse_config_file(path: Path) -> Dict[str, Any]:
    txt = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    if suffix == ".toml":
        return _load_toml_text(txt) or {}
    if suffix in (".yaml", ".yml"):
        return _load_yaml_text(txt) or {}
    _log.warning("Unknown config extension '%s' for %s; ignoring.", suffix, path)
    return {}


# ---------- Merging & coercion ----------


def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep-merge two dicts: values in 'b' override 'a'; nested dicts are merged recursively.
    """
    out = dict(a)
    for k, v in b.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _as_str_list(v: Any) -> list[str]:
    if v is None:
        return []
    if isinstance(v, (str, Path)):
        return [str(v)]
    return [str(x) for x in v]


def _coerce_types(d: Dict[str, Any]) -> Dict[str, Any]:
    """
    Coerce the known [builder] fields so downstream code gets stable types.
      - max_depth: int >= 0, or None (absent / "none" / empty)
      - interest, additional_sys_path: list[str]
      - log_level: upper-cased str
    """
    out = dict(d)

    raw_depth = out.get("max_depth")
    if raw_depth in (None, "", "none", "None"):
        out["max_depth"] = None
    else:
        try:
            depth = int(raw_depth)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"max_depth must be an integer, got {raw_depth!r}") from exc
        if depth < 0:
            raise ConfigError(f"max_depth must be >= 0, got {depth}")
        out["max_depth"] = depth

    for k in ("interest", "additional_sys_path"):
        out[k] = _as_str_list(out.get(k))

    if out.get("log_level"):
        out["log_level"] = str(out["log_level"]).upper()

    return out


def _effective(section: str, raw: Dict[str, Any]) -> Dict[str, Any]:
    """
    Compute the effective section by merging:
      effective = deep_merge(raw['defaults'] or {}, raw[section] or {})
    then coercing types.
    """
    eff = _deep_merge(raw.get("defaults", {}) or {}, raw.get(section, {}) or {})
    eff = _coerce_types(eff)
    _log.info("Effective config for [%s]: %s", section, eff)
    return eff


# ---------- Loader (layering: embedded < user < project) ----------


def load_config(start: Path | None = None) -> Dict[str, Any]:
    """
    Layered load:
      base = packaged defaults (pydummy/default_config.toml)
      base <- deep-merge user-level config (if any)
      base <- deep-merge nearest project config (if any)

    Returns a single dict that still contains all sections.
    """
    global LAST_CONFIG_PATH

    # 1) Packaged defaults (TOML)
    base: Dict[str, Any] = {}
    try:
        txt = ir.files("pydummy").joinpath("default_config.toml").read_text(encoding="utf-8")
        base = _load_toml_text(txt) or {}
    except Exception as exc:
        _log.info("No packaged defaults available: %s", exc)

    # 2) User-level (global) config
    user_cfg_path = _find_user_config()
    if user_cfg_path:
        base = _deep_merge(base, _parse_config_file(user_cfg_path))

    # 3) Project-local (most specific) config
    proj_cfg_path = _find_project_config((start or Path.cwd()).resolve())
    if proj_cfg_path:
        base = _deep_merge(base, _parse_config_file(proj_cfg_path))
    LAST_CONFIG_PATH = proj_cfg_path

    return base


def get_effective_config(section: str = "builder", start: Path | None = None) -> Dict[str, Any]:
    """
    Return the effective config dict for a section (e.g. "builder"):
    [defaults] -> [section] over the layered configuration, types coerced.
    """
    return _effective(section, load_config(start))


def project_root(start: Path | None = None) -> Path:
    """Directory holding the '.pydummy' folder of the last project config, else start/CWD."""
    if LAST_CONFIG_PATH is not None:
        return LAST_CONFIG_PATH.parent.parent
    return (start or Path.cwd()).resolve()


def builder_from_config(eff: Dict[str, Any], root: Path) -> ObjectBuilder:
    """
    Build an ObjectBuilder from an effective [builder] section: extend sys.path,
    then pre-register every `interest` class with `add_class`.
    """
    if eff.get("log_level"):
        configure_logger(eff["log_level"])

    roots = normalize_roots(root, eff.get("additional_sys_path"))
    if roots:
        _log.info("import roots: %s", roots)
        prepend_sys_path(roots)

    builder = ObjectBuilder(max_depth=eff.get("max_depth"))
    for name in eff.get("interest") or []:
        try:
            cls = resolve_attr(name)
        except (ImportError, AttributeError) as exc:
            raise ConfigError(f"cannot resolve interest class {name!r}: {exc}") from exc
        if not isinstance(cls, type):
            raise ConfigError(f"interest entry {name!r} is not a class")
        builder.add_class(cls)
    return builder


def load_builder(start: Path | None = None, section: str = "builder") -> ObjectBuilder:
    eff = get_effective_config(section, start)
    return builder_from_config(eff, project_root(start))
