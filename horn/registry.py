"""Name → generator lookup.

A ``ProfileRegistry`` is an ordinary object owned by whoever builds it; there
is no process-wide table. ``default_registry()`` returns a fresh registry
with the built-in profile families.
"""

from horn.profiles import (
    ConicalProfile, ExponentialProfile, SphericalProfile, TractrixProfile,
)


def _normalize_name(name):
    return str(name).strip().lower()


class ProfileRegistry:
    """Maps profile type names to zero-argument generator factories."""

    def __init__(self):
        self._factories = {}

    def register(self, name, factory):
        key = _normalize_name(name)
        if not key:
            raise ValueError("Profile name cannot be empty")
        self._factories[key] = factory

    def get(self, name):
        """Factory for name, or None."""
        return self._factories.get(_normalize_name(name))

    def has(self, name):
        return _normalize_name(name) in self._factories

    def list(self):
        return list(self._factories)

    def clear(self):
        self._factories.clear()

    def create_instance(self, name):
        """Instantiate the generator registered under name.

        Raises
        ------
        KeyError
            If no generator is registered under that name.
        """
        factory = self.get(name)
        if factory is None:
            raise KeyError(
                f"Unknown profile type: {name}. "
                f"Available profiles: {', '.join(self.list())}"
            )
        return factory()


BUILTIN_PROFILES = {
    'conical': ConicalProfile,
    'exponential': ExponentialProfile,
    'spherical': SphericalProfile,
    'tractrix': TractrixProfile,
}


def default_registry():
    registry = ProfileRegistry()
    for name, cls in BUILTIN_PROFILES.items():
        registry.register(name, cls)
    return registry


def generate_profile(profile_type, params, registry=None):
    """Look up profile_type and generate it from params.

    Parameters
    ----------
    profile_type : str
        Registered name, e.g. 'exponential'.
    params : HornProfileParameters or dict
    registry : ProfileRegistry or None
        Defaults to a fresh ``default_registry()``.

    Returns
    -------
    ProfileGeneratorResult
    """
    if registry is None:
        registry = default_registry()
    return registry.create_instance(profile_type).generate(params)
