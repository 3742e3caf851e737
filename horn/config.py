"""YAML configuration loading with inheritance.

A file holds either one horn under ``horn:`` or several named horns under
``configs:``; a named horn may start from another through a ``base:`` key
and override individual fields (deep merge, None removes a key).
"""

import copy
from pathlib import Path

import yaml

from horn.parameters import HornProfileParameters

DEFAULT_OUTPUTS = ['profile', 'plot', 'summary']

# Config keys holding lengths; these accept a trailing 'mm'
_LENGTH_KEYS = (
    'throat_radius', 'mouth_radius', 'throat_width', 'throat_height',
    'mouth_width', 'mouth_height', 'length', 'transition_length',
)


def _deep_merge(base, overrides):
    """Recursively merge overrides into base dict.

    - Scalars in overrides replace base values
    - Dicts are merged recursively
    - None values in overrides remove the key
    """
    result = copy.deepcopy(base)
    for key, value in overrides.items():
        if value is None:
            result.pop(key, None)
        elif isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def _resolve_config(name, all_raw, resolved_cache, chain=()):
    """Resolve one named config, following base references.

    Raises
    ------
    ValueError
        On an unknown or circular base reference.
    """
    if name in resolved_cache:
        return resolved_cache[name]
    if name in chain:
        raise ValueError(
            f"Circular base reference: {' -> '.join(chain + (name,))}"
        )

    raw = all_raw[name]
    if 'base' in raw:
        base_name = raw['base']
        if base_name not in all_raw:
            raise ValueError(
                f"Config '{name}' references unknown base '{base_name}'"
            )
        base_resolved = _resolve_config(base_name, all_raw, resolved_cache,
                                        chain + (name,))
        overrides = {k: v for k, v in raw.items() if k != 'base'}
        resolved = _deep_merge(base_resolved, overrides)
    else:
        resolved = copy.deepcopy(raw)

    resolved_cache[name] = resolved
    return resolved


def load_config(path):
    """Load a horn design configuration from YAML.

    Parameters
    ----------
    path : str or Path

    Returns
    -------
    dict with keys:
        configs : dict of {name: resolved_config}
        comparisons : list of lists of config names
        outputs : list of output types ('profile', 'plot', 'summary')
    """
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f)

    if raw is None:
        raise ValueError(f"Empty config file: {path}")

    if 'horn' in raw and 'configs' not in raw:
        configs_raw = {'default': raw['horn']}
    elif 'configs' in raw:
        configs_raw = raw['configs']
    else:
        configs_raw = {'default': raw}

    resolved_cache = {}
    configs = {name: _resolve_config(name, configs_raw, resolved_cache)
               for name in configs_raw}

    return {
        'configs': configs,
        'comparisons': raw.get('comparisons', []),
        'outputs': raw.get('outputs', DEFAULT_OUTPUTS),
    }


def _parse_length(value):
    """Parse a length in millimeters.

    Plain numbers and strings with an optional 'mm' suffix are accepted;
    other units are rejected.
    """
    if isinstance(value, (int, float)):
        return float(value)

    s = str(value).strip()
    if s.endswith('mm'):
        s = s[:-2].strip()
    try:
        return float(s)
    except ValueError:
        raise ValueError(
            f"Cannot parse length {value!r}: lengths are plain millimeters"
        ) from None


def build_horn_spec(cfg):
    """Convert a resolved config dict into a profile type and parameters.

    Parameters
    ----------
    cfg : dict
        Resolved config from load_config. ``type`` selects the profile
        family (default 'exponential'); every other key is a horn
        parameter in snake_case or camelCase.

    Returns
    -------
    profile_type : str
    params : HornProfileParameters
    """
    fields = {k: v for k, v in cfg.items() if k != 'type'}
    params = HornProfileParameters.from_dict(fields)
    for key in _LENGTH_KEYS:
        value = getattr(params, key)
        if value is not None:
            setattr(params, key, _parse_length(value))
    return str(cfg.get('type', 'exponential')).strip().lower(), params
